"""
Users API - load a users flat file into Postgres and serve it over HTTP.

On startup the importer flattens the dotted-path columns of the source file
into one row per user (with JSONB `address` and `additional_info`
sub-documents), skipping the import when the table already holds data. The
HTTP layer then serves two read endpoints:

- GET /api/users             every user, ordered by id
- GET /api/age-distribution  share of users per age bracket
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from users_api.config import Settings, get_settings
from users_api.domain.models import AgeDistribution, NewUser, UserRecord
from users_api.ingest.importer import ImportResult, Importer
from users_api.service.queries import QueryService, compute_age_distribution
from users_api.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "AgeDistribution",
    "NewUser",
    "UserRecord",
    # Import / queries
    "ImportResult",
    "Importer",
    "QueryService",
    "compute_age_distribution",
    # Logging
    "configure_logging",
    "get_logger",
]
