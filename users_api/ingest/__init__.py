"""
Ingest package: parse the users flat file and load it into the store.
"""

from users_api.ingest.importer import ImportResult, Importer
from users_api.ingest.parser import build_user, expand_dotted, parse_age, parse_rows

__all__ = [
    "ImportResult",
    "Importer",
    "build_user",
    "expand_dotted",
    "parse_age",
    "parse_rows",
]
