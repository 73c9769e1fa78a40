"""
Read-only queries over the `users` table.

`compute_age_distribution` holds the bracket arithmetic; `QueryService` wires
it to a repository so the HTTP layer only deals with domain models.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from users_api.domain.models import AgeDistribution, UserRecord

# (label, lower bound inclusive, upper bound exclusive); None means unbounded.
AGE_BRACKETS: Tuple[Tuple[str, Optional[int], Optional[int]], ...] = (
    ("Under 20", None, 20),
    ("20 - 40", 20, 40),
    ("40 - 60", 40, 60),
    ("Over 60", 60, None),
)


@runtime_checkable
class UserReader(Protocol):
    def list_users(self) -> List[UserRecord]: ...

    def list_ages(self) -> List[int]: ...


def _round_float(value: float, decimals: int = 2) -> float:
    return round(value, decimals)


def bracket_for(age: int) -> str:
    """Label of the bracket containing `age`."""
    for label, lower, upper in AGE_BRACKETS:
        if (lower is None or age >= lower) and (upper is None or age < upper):
            return label
    raise ValueError(f"No age bracket for {age}")  # pragma: no cover - brackets are exhaustive


def compute_age_distribution(ages: Iterable[int]) -> AgeDistribution:
    """
    Percentage of `ages` in each bracket, rounded to 2 decimals.

    An empty input reports every bracket as 0.0.
    """
    counts = {label: 0 for label, _, _ in AGE_BRACKETS}
    total = 0
    for age in ages:
        counts[bracket_for(age)] += 1
        total += 1

    distribution = {
        label: _round_float(100 * count / total) if total else 0.0
        for label, count in counts.items()
    }
    return AgeDistribution(total=total, distribution=distribution)


class QueryService:
    def __init__(self, repository: UserReader) -> None:
        self._repository = repository

    def list_users(self) -> List[UserRecord]:
        """Every user, ordered by id."""
        return self._repository.list_users()

    def age_distribution(self) -> AgeDistribution:
        return compute_age_distribution(self._repository.list_ages())


__all__ = ["AGE_BRACKETS", "QueryService", "UserReader", "bracket_for", "compute_age_distribution"]
