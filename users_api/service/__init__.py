"""
Service package: read-side operations exposed over HTTP and the CLI.
"""

from users_api.service.queries import AGE_BRACKETS, QueryService, compute_age_distribution

__all__ = [
    "AGE_BRACKETS",
    "QueryService",
    "compute_age_distribution",
]
