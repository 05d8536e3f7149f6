"""Meal attendance reads and writes."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from meal_tracker.domain.attendance import (
    DayAttendance,
    Meal,
    MealStatus,
    UserRecord,
    format_date_key,
    week_dates,
)
from meal_tracker.domain.errors import RecordNotFoundError

STATUS_CYCLE: tuple[MealStatus | None, ...] = (
    MealStatus.PRESENT,
    MealStatus.ABSENT,
    MealStatus.PACKED,
    MealStatus.LATE,
    None,
)


class AttendanceRepository(Protocol):
    """Persistence interface for per-user attendance records."""

    def get_user(self, username: str) -> UserRecord | None:
        """Return the record for a username, if present."""

    def insert_user(self, record: UserRecord) -> None:
        """Insert a new record."""

    def update_profile(  # noqa: PLR0913
        self,
        username: str,
        diet: str | None,
        centre: str,
        name: str,
        birthday: date | None,
    ) -> None:
        """Patch the static fields of an existing record."""

    def replace_attendance(
        self, username: str, meal_attendance: dict[str, DayAttendance]
    ) -> bool:
        """Overwrite the whole attendance map; return False when missing."""

    def set_meal_status(
        self, username: str, date_key: str, meal: Meal, status: MealStatus | None
    ) -> bool:
        """Patch a single date/meal cell; return False when missing."""


@dataclass
class AttendanceService:
    """Application service for the attendance store."""

    repository: AttendanceRepository

    def create_if_absent(  # noqa: PLR0913
        self,
        username: str,
        initial_week: dict[str, DayAttendance],
        diet: str | None,
        centre: str,
        name: str | None = None,
        birthday: date | None = None,
    ) -> UserRecord:
        """Create the record, or refresh its static fields if it exists."""
        display_name = name or username
        existing = self.repository.get_user(username)
        if existing:
            self.repository.update_profile(
                username, diet, centre, display_name, birthday
            )
            return UserRecord(
                username=username,
                centre=centre,
                name=display_name,
                diet=diet,
                birthday=birthday or existing.birthday,
                meal_attendance=existing.meal_attendance,
            )

        record = UserRecord(
            username=username,
            centre=centre,
            name=display_name,
            diet=diet,
            birthday=birthday,
            meal_attendance=dict(initial_week),
        )
        self.repository.insert_user(record)
        return record

    def read(self, username: str) -> UserRecord | None:
        """Return the record for a username, or None when not found."""
        return self.repository.get_user(username)

    def replace_attendance(
        self, username: str, meal_attendance: dict[str, DayAttendance]
    ) -> None:
        """Overwrite the entire attendance map for a user."""
        if not self.repository.replace_attendance(username, meal_attendance):
            raise RecordNotFoundError(f"No attendance record for {username}")

    def set_meal_status(
        self, username: str, day: date, meal: Meal, status: MealStatus | None
    ) -> None:
        """Update one date/meal cell without touching the rest of the map."""
        date_key = format_date_key(day)
        if not self.repository.set_meal_status(username, date_key, meal, status):
            raise RecordNotFoundError(f"No attendance record for {username}")

    @staticmethod
    def initial_week(today: date) -> dict[str, DayAttendance]:
        """Return the current week keyed by date, every meal unset."""
        return {format_date_key(day): DayAttendance() for day in week_dates(today)}

    @staticmethod
    def cycle_status(current: MealStatus | None) -> MealStatus | None:
        """Return the status that follows ``current`` when a cell is tapped."""
        index = STATUS_CYCLE.index(current)
        return STATUS_CYCLE[(index + 1) % len(STATUS_CYCLE)]
