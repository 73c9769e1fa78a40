"""
Domain package for the users API.

Exports the record models shared by the importer, the query service and the
HTTP layer. Keep this package focused on data definitions.
"""

from users_api.domain.models import (
    Address,
    AdditionalInfo,
    AgeDistribution,
    Employment,
    NewUser,
    Preferences,
    UserRecord,
)

__all__ = [
    "Address",
    "AdditionalInfo",
    "AgeDistribution",
    "Employment",
    "NewUser",
    "Preferences",
    "UserRecord",
]
