"""
Database module for Guildhall backend
"""

from .connection import create_all, get_async_session, init_database, reset_database

__all__ = ["create_all", "get_async_session", "init_database", "reset_database"]
