"""Supabase-backed attendance store on the users table."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from meal_tracker.domain.attendance import DayAttendance, Meal, MealStatus, UserRecord
from meal_tracker.services.attendance import AttendanceRepository

USER_COLUMNS = "username, centre, name, diet, birthday, meal_attendance"


@dataclass
class SupabaseUserRepository(AttendanceRepository):
    """Supabase implementation for per-user attendance records."""

    client: Client

    def get_user(self, username: str) -> UserRecord | None:
        """Return the record for a username, if present."""
        response = (
            self.client.table("users")
            .select(USER_COLUMNS)
            .eq("username", username)
            .limit(1)
            .execute()
        )
        if response.data:
            return parse_user(response.data[0])
        return None

    def insert_user(self, record: UserRecord) -> None:
        """Insert a new user row."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "username": record.username,
                    "centre": record.centre,
                    "name": record.name,
                    "diet": record.diet,
                    "birthday": _serialize_birthday(record.birthday),
                    "meal_attendance": serialize_attendance(record.meal_attendance),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")

    def update_profile(  # noqa: PLR0913
        self,
        username: str,
        diet: str | None,
        centre: str,
        name: str,
        birthday: date | None,
    ) -> None:
        """Patch static fields; a None birthday leaves the stored one alone."""
        payload: dict[str, object] = {"diet": diet, "centre": centre, "name": name}
        if birthday is not None:
            payload["birthday"] = birthday.isoformat()
        self.client.table("users").update(payload).eq("username", username).execute()

    def replace_attendance(
        self, username: str, meal_attendance: dict[str, DayAttendance]
    ) -> bool:
        """Overwrite the attendance map of a user."""
        response = (
            self.client.table("users")
            .update({"meal_attendance": serialize_attendance(meal_attendance)})
            .eq("username", username)
            .execute()
        )
        return bool(response.data)

    def set_meal_status(
        self, username: str, date_key: str, meal: Meal, status: MealStatus | None
    ) -> bool:
        """Patch one cell in place through the set_meal_status function."""
        response = self.client.rpc(
            "set_meal_status",
            {
                "p_username": username,
                "p_date_key": date_key,
                "p_meal": meal.value,
                "p_status": status.value if status else None,
            },
        ).execute()
        return bool(response.data)


def parse_user(row: dict[str, object]) -> UserRecord:
    """Parse a users row into a domain record."""
    username = str(row["username"])
    raw_attendance = row.get("meal_attendance")
    meal_attendance = (
        {
            str(key): DayAttendance.from_dict(value)
            for key, value in raw_attendance.items()
        }
        if isinstance(raw_attendance, dict)
        else {}
    )
    return UserRecord(
        username=username,
        centre=str(row.get("centre") or ""),
        name=str(row.get("name") or username),
        diet=row.get("diet"),
        birthday=row.get("birthday"),
        meal_attendance=meal_attendance,
    )


def serialize_attendance(
    meal_attendance: dict[str, DayAttendance],
) -> dict[str, dict[str, str | None]]:
    """Serialize an attendance map to its stored JSON shape."""
    return {key: day.to_dict() for key, day in meal_attendance.items()}


def _serialize_birthday(value: object) -> object:
    if isinstance(value, date):
        return value.isoformat()
    return value
