"""Diet reference data."""

from dataclasses import dataclass
from typing import Protocol

from meal_tracker.domain.centres import DietInfo


class DietRepository(Protocol):
    """Read interface for diet reference data."""

    def list_diets(self) -> list[DietInfo]:
        """Return all diets."""


@dataclass
class DietService:
    """Service for diet lookups."""

    repository: DietRepository

    def list_diets(self) -> list[DietInfo]:
        """Return diets sorted by display name."""
        return sorted(self.repository.list_diets(), key=lambda diet: diet.name.lower())
