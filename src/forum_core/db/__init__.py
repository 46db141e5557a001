"""Database configuration and utilities."""

from .session import Base, SessionLocal, create_tables, engine

__all__ = ["Base", "SessionLocal", "create_tables", "engine"]
