"""
HTTP surface of the users API (FastAPI).
"""

from users_api.api.app import create_app

__all__ = ["create_app"]
