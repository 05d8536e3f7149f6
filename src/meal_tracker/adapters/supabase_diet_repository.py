"""Supabase repository for diet reference data."""

from dataclasses import dataclass

from supabase import Client

from meal_tracker.domain.centres import DietInfo
from meal_tracker.services.diets import DietRepository


@dataclass
class SupabaseDietRepository(DietRepository):
    """Supabase implementation for diets."""

    client: Client

    def list_diets(self) -> list[DietInfo]:
        """Return all diets."""
        response = (
            self.client.table("diets").select("id, name, description").execute()
        )
        diets = []
        for row in response.data or []:
            diet_id = str(row["id"])
            diets.append(
                DietInfo(
                    id=diet_id,
                    name=str(row.get("name") or diet_id),
                    description=str(row.get("description") or ""),
                )
            )
        return diets
