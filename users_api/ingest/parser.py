"""
Flat-file parsing and normalization for the user import.

The source file is comma-delimited with a header row of dotted-path column
names (`name.firstName`, `address.city`, `preferences.food.type`, ...). Each
data row is read into a flat mapping, expanded into a nested document and
mapped onto a `NewUser`.
"""

from __future__ import annotations

import csv
import re
from typing import Any, Dict, List, Optional

from users_api.domain.models import Address, AdditionalInfo, Employment, NewUser, Preferences

FlatRow = Dict[str, Optional[str]]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_rows(text: str, delimiter: str = ",") -> List[FlatRow]:
    """
    Split delimited text on newlines into one mapping per non-empty data line.

    The first line names the columns. Values are trimmed; a field that is
    missing or blank after trimming maps to None.
    """
    header: Optional[List[str]] = None
    rows: List[FlatRow] = []
    for line in text.split("\n"):
        # One record per line: an unbalanced quote must not pull in the next line.
        fields = next(csv.reader([line.rstrip("\r")], delimiter=delimiter), [])
        if header is None:
            header = [name.strip().lstrip("\ufeff") for name in fields]
            continue
        if not any(field.strip() for field in fields):
            continue
        rows.append(
            {
                name: (fields[i].strip() or None) if i < len(fields) else None
                for i, name in enumerate(header)
            }
        )
    return rows


def expand_dotted(row: FlatRow) -> Dict[str, Any]:
    """
    Turn dotted keys into nested dicts.

    >>> expand_dotted({"address.city": "Pune", "age": "31"})
    {'address': {'city': 'Pune'}, 'age': '31'}
    """
    doc: Dict[str, Any] = {}
    for key, value in row.items():
        parts = key.split(".")
        node = doc
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        leaf = parts[-1]
        if not isinstance(node.get(leaf), dict):
            node[leaf] = value
    return doc


def _dig(doc: Dict[str, Any], *path: str) -> Any:
    node: Any = doc
    for part in path:
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    if isinstance(node, dict):
        return None
    return node or None


def parse_age(value: Optional[str]) -> int:
    """Leading integer of `value`, or 0 when there is none."""
    if not value:
        return 0
    match = _LEADING_INT.match(value)
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        # Digit runs past the interpreter's int conversion limit.
        return 0


def build_user(row: FlatRow) -> Optional[NewUser]:
    """
    Map one flat source row onto a `NewUser`.

    Returns None when the first name is empty or absent; that row is skipped.
    """
    doc = expand_dotted(row)
    first_name = _dig(doc, "name", "firstName")
    if not first_name:
        return None
    last_name = _dig(doc, "name", "lastName") or ""

    return NewUser(
        name=f"{first_name} {last_name}".strip(),
        age=parse_age(_dig(doc, "age")),
        address=Address(
            line1=_dig(doc, "address", "line1"),
            line2=_dig(doc, "address", "line2"),
            city=_dig(doc, "address", "city"),
            state=_dig(doc, "address", "state"),
        ),
        additional_info=AdditionalInfo(
            gender=_dig(doc, "gender"),
            employment=Employment(
                status=_dig(doc, "employment", "status"),
                company=_dig(doc, "employment", "company"),
            ),
            preferences=Preferences(
                food=_dig(doc, "preferences", "food", "type"),
                color=_dig(doc, "preferences", "color", "favorite"),
            ),
        ),
    )


__all__ = ["build_user", "expand_dotted", "parse_age", "parse_rows"]
