"""
Domain models for the users API.

Defines the record schema aligned with the `users` table: scalar columns for
`name` and `age`, and two JSONB sub-documents (`address`, `additional_info`)
built from the dotted-path columns of the source file.
"""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

_FROZEN = ConfigDict(frozen=True, populate_by_name=True)


class Address(BaseModel):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    model_config = _FROZEN


class Employment(BaseModel):
    status: Optional[str] = None
    company: Optional[str] = None

    model_config = _FROZEN


class Preferences(BaseModel):
    food: Optional[str] = None
    color: Optional[str] = None

    model_config = _FROZEN


class AdditionalInfo(BaseModel):
    gender: Optional[str] = None
    employment: Employment = Field(default_factory=Employment)
    preferences: Preferences = Field(default_factory=Preferences)

    model_config = _FROZEN


class NewUser(BaseModel):
    """
    A user built from one source row, not yet persisted (no `id`).
    """

    name: str = Field(..., description="First and last name, trimmed.")
    age: int = Field(0, description="Parsed age; 0 when absent or unparseable.")
    address: Address = Field(default_factory=Address)
    additional_info: AdditionalInfo = Field(default_factory=AdditionalInfo)

    model_config = _FROZEN


class UserRecord(BaseModel):
    """
    Representation of a single row in the `users` table.
    """

    id: int = Field(..., description="Primary key (SERIAL), insertion order.")
    name: str
    age: int
    address: Optional[Address] = None
    additional_info: Optional[AdditionalInfo] = None

    model_config = _FROZEN


class AgeDistribution(BaseModel):
    """
    Share of users per age bracket, as percentages rounded to 2 decimals.
    """

    total: int
    distribution: Dict[str, float]

    model_config = _FROZEN


__all__ = [
    "Address",
    "AdditionalInfo",
    "AgeDistribution",
    "Employment",
    "NewUser",
    "Preferences",
    "UserRecord",
]
