"""Database layer for microbooks application."""

from microbooks.database.base import Database
from microbooks.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
