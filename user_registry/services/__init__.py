"""Persistence services."""
