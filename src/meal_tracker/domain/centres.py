"""Domain models for centres and their members."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class Role(StrEnum):
    """Member roles within a centre."""

    ADMIN = "admin"
    CARER = "carer"
    THERAPIST = "therapist"


@dataclass(frozen=True)
class Centre:
    """A care facility; the partition boundary for users and reports."""

    id: str
    name: str
    code: str


@dataclass(frozen=True)
class CentreMember:
    """A person who can sign in at a centre."""

    id: str
    centre_id: str
    name: str
    role: Role
    diet: str | None = None
    birthday: date | None = None
    password: str | None = None


@dataclass(frozen=True)
class SignInProfile:
    """Values a signed-in client keeps locally."""

    username: str
    name: str
    diet: str | None
    centre: str
    role: Role


@dataclass(frozen=True)
class DietInfo:
    """Dietary-restriction reference entry."""

    id: str
    name: str
    description: str
