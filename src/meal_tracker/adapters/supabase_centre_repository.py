"""Supabase repository for centres and members."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from meal_tracker.adapters.supabase_chat_repository import is_uuid
from meal_tracker.domain.centres import Centre, CentreMember, Role
from meal_tracker.services.centres import CentreRepository

MEMBER_COLUMNS = "id, centre_id, name, role, diet, birthday, password"


@dataclass
class SupabaseCentreRepository(CentreRepository):
    """Supabase implementation for centres and normalized member rows."""

    client: Client

    def list_centres(self) -> list[Centre]:
        """Return all centres ordered by name."""
        response = (
            self.client.table("centres")
            .select("id, name, code")
            .order("name", desc=False)
            .execute()
        )
        return [_parse_centre(row) for row in response.data or []]

    def get_centre(self, centre_id: str) -> Centre | None:
        """Return a centre by id, if present."""
        response = (
            self.client.table("centres")
            .select("id, name, code")
            .eq("id", centre_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_centre(response.data[0])

    def list_members(self, centre_id: str) -> list[CentreMember]:
        """Return members of a centre ordered by name."""
        response = (
            self.client.table("centre_members")
            .select(MEMBER_COLUMNS)
            .eq("centre_id", centre_id)
            .order("name", desc=False)
            .execute()
        )
        return [_parse_member(row) for row in response.data or []]

    def get_member(self, centre_id: str, member_id: str) -> CentreMember | None:
        """Return a member by id, if present."""
        if not is_uuid(member_id):
            return None
        response = (
            self.client.table("centre_members")
            .select(MEMBER_COLUMNS)
            .eq("centre_id", centre_id)
            .eq("id", member_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_member(response.data[0])

    def create_member(
        self, centre_id: str, payload: dict[str, object]
    ) -> CentreMember:
        """Create a member row and return it."""
        response = (
            self.client.table("centre_members")
            .insert({"centre_id": centre_id, **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create centre member")
        return _parse_member(response.data[0])

    def update_member(
        self, centre_id: str, member_id: str, changes: dict[str, object]
    ) -> CentreMember | None:
        """Update only the supplied columns of a member row."""
        if not is_uuid(member_id):
            return None
        if not changes:
            return self.get_member(centre_id, member_id)
        response = (
            self.client.table("centre_members")
            .update(changes)
            .eq("centre_id", centre_id)
            .eq("id", member_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_member(response.data[0])

    def delete_member(self, centre_id: str, member_id: str) -> bool:
        """Delete a member row."""
        if not is_uuid(member_id):
            return False
        response = (
            self.client.table("centre_members")
            .delete()
            .eq("centre_id", centre_id)
            .eq("id", member_id)
            .execute()
        )
        return bool(response.data)


def _parse_centre(row: dict[str, object]) -> Centre:
    centre_id = str(row["id"])
    return Centre(
        id=centre_id,
        name=str(row.get("name") or centre_id),
        code=str(row.get("code") or ""),
    )


def _parse_member(row: dict[str, object]) -> CentreMember:
    birthday_raw = row.get("birthday")
    birthday = (
        date.fromisoformat(birthday_raw[:10])
        if isinstance(birthday_raw, str) and birthday_raw
        else None
    )
    return CentreMember(
        id=str(row["id"]),
        centre_id=str(row.get("centre_id", "")),
        name=str(row.get("name", "")),
        role=Role(str(row.get("role") or Role.CARER.value)),
        diet=row.get("diet"),
        birthday=birthday,
        password=row.get("password"),
    )
