"""User model."""

from sqlalchemy import Column, DateTime, Integer, String, func

from user_registry.database import Base


class User(Base):
    """A registered user. Rows are only ever inserted, never updated."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
