"""User registry: list and create users over HTTP."""
