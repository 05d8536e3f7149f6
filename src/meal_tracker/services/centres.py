"""Centre access and member management."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from meal_tracker.domain.centres import Centre, CentreMember, Role, SignInProfile
from meal_tracker.domain.errors import (
    InvalidCentreCodeError,
    InvalidPasswordError,
    RecordNotFoundError,
)
from meal_tracker.services.attendance import AttendanceService
from meal_tracker.services.birthdays import parse_birthday

logger = logging.getLogger(__name__)

MEMBER_FIELDS = {"name", "role", "diet", "birthday", "password"}
REQUIRED_MEMBER_FIELDS = ("name", "role")


class CentreRepository(Protocol):
    """Persistence interface for centres and their members."""

    def list_centres(self) -> list[Centre]:
        """Return all centres."""

    def get_centre(self, centre_id: str) -> Centre | None:
        """Return a centre by id, if present."""

    def list_members(self, centre_id: str) -> list[CentreMember]:
        """Return members of a centre."""

    def get_member(self, centre_id: str, member_id: str) -> CentreMember | None:
        """Return a member by id, if present."""

    def create_member(
        self, centre_id: str, payload: dict[str, object]
    ) -> CentreMember:
        """Create a member and return it."""

    def update_member(
        self, centre_id: str, member_id: str, changes: dict[str, object]
    ) -> CentreMember | None:
        """Update selected member fields; return None when missing."""

    def delete_member(self, centre_id: str, member_id: str) -> bool:
        """Delete a member; return False when missing."""


@dataclass
class CentreService:
    """Application service for centre sign-in and member management."""

    repository: CentreRepository
    attendance_service: AttendanceService

    def list_centres(self) -> list[Centre]:
        """Return all centres."""
        return self.repository.list_centres()

    def verify_code(self, centre_id: str, code: str) -> bool:
        """Return True when the access code matches the centre's code."""
        centre = self.repository.get_centre(centre_id)
        return centre is not None and centre.code == code

    def list_members(self, centre_id: str) -> list[CentreMember]:
        """Return the sign-in picker entries for a centre."""
        return self.repository.list_members(centre_id)

    def add_member(self, centre_id: str, payload: dict[str, object]) -> CentreMember:
        """Validate and create a member."""
        if not str(payload.get("name") or "").strip():
            raise ValueError("Member name is required")
        cleaned = _clean_member_fields(payload)
        cleaned.setdefault("role", Role.CARER.value)
        return self.repository.create_member(centre_id, cleaned)

    def update_member(
        self, centre_id: str, member_id: str, changes: dict[str, object]
    ) -> CentreMember:
        """Update only the given member fields."""
        updated = self.repository.update_member(
            centre_id, member_id, _clean_member_fields(changes)
        )
        if updated is None:
            raise RecordNotFoundError(f"No member {member_id} in {centre_id}")
        return updated

    def remove_member(self, centre_id: str, member_id: str) -> None:
        """Remove a member from a centre."""
        if not self.repository.delete_member(centre_id, member_id):
            raise RecordNotFoundError(f"No member {member_id} in {centre_id}")

    def sign_in(  # noqa: PLR0913
        self,
        centre_id: str,
        code: str,
        member_id: str,
        password: str | None = None,
        today: date | None = None,
    ) -> SignInProfile:
        """Check access and make sure the member has an attendance record."""
        if not self.verify_code(centre_id, code):
            raise InvalidCentreCodeError(f"Invalid code for centre {centre_id}")
        member = self.repository.get_member(centre_id, member_id)
        if member is None:
            raise RecordNotFoundError(f"No member {member_id} in {centre_id}")
        if member.role == Role.ADMIN and (
            not member.password or password != member.password
        ):
            raise InvalidPasswordError("Incorrect admin password")

        initial_week = AttendanceService.initial_week(today or date.today())
        self.attendance_service.create_if_absent(
            member.id,
            initial_week,
            diet=member.diet,
            centre=centre_id,
            name=member.name,
            birthday=member.birthday,
        )
        logger.info(
            "Member signed in", extra={"centre": centre_id, "member_id": member.id}
        )
        return SignInProfile(
            username=member.id,
            name=member.name,
            diet=member.diet,
            centre=centre_id,
            role=member.role,
        )


def _clean_member_fields(payload: dict[str, object]) -> dict[str, object]:
    cleaned = {key: value for key, value in payload.items() if key in MEMBER_FIELDS}
    for key in REQUIRED_MEMBER_FIELDS:
        if key in cleaned and not str(cleaned[key] or "").strip():
            raise ValueError(f"Member {key} must not be empty")
    if "role" in cleaned:
        cleaned["role"] = Role(str(cleaned["role"])).value
    if cleaned.get("birthday") is not None:
        cleaned["birthday"] = parse_birthday(cleaned["birthday"]).isoformat()
    return cleaned
