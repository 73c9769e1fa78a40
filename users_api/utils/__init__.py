"""
Utilities package for the users API.

Exports shared cross-cutting helpers. Keep this package free of domain logic.
"""

from users_api.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
