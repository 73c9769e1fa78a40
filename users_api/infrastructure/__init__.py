"""
Infrastructure package for the users API.

Centralizes database connectivity (the pooled `Database` handle) and the SQL
for the `users` table. Keep this layer focused on I/O.
"""

from users_api.infrastructure.db_factory import Database, build_dsn, wait_for_database
from users_api.infrastructure.repository import UserRepository

__all__ = [
    "Database",
    "UserRepository",
    "build_dsn",
    "wait_for_database",
]
