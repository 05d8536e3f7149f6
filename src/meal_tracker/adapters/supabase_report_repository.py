"""Supabase repository for centre reports."""

from dataclasses import dataclass

from supabase import Client

from meal_tracker.adapters.supabase_user_repository import USER_COLUMNS, parse_user
from meal_tracker.domain.attendance import UserRecord
from meal_tracker.services.reports import ReportRepository


@dataclass
class SupabaseReportRepository(ReportRepository):
    """Supabase implementation for report queries."""

    client: Client

    def list_users_for_centre(self, centre: str) -> list[UserRecord]:
        """Return every user row of a centre."""
        response = (
            self.client.table("users")
            .select(USER_COLUMNS)
            .eq("centre", centre)
            .execute()
        )
        return [parse_user(row) for row in response.data or []]
