"""Domain models for meal attendance."""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import StrEnum

DATE_KEY_FORMAT = "%b %d, %Y"
DAYS_IN_WEEK = 7


class Meal(StrEnum):
    """Meals tracked for each day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class MealStatus(StrEnum):
    """Attendance state of one user for one meal."""

    PRESENT = "present"
    ABSENT = "absent"
    PACKED = "packed"
    LATE = "late"


@dataclass(frozen=True)
class DayAttendance:
    """Status triple for a single date; None means not set."""

    breakfast: MealStatus | None = None
    lunch: MealStatus | None = None
    dinner: MealStatus | None = None

    def status_for(self, meal: Meal) -> MealStatus | None:
        """Return the status recorded for a meal."""
        return getattr(self, meal.value)

    def with_status(self, meal: Meal, status: MealStatus | None) -> "DayAttendance":
        """Return a copy with one meal changed."""
        return replace(self, **{meal.value: status})

    def to_dict(self) -> dict[str, str | None]:
        """Serialize to the stored JSON shape."""
        payload: dict[str, str | None] = {}
        for meal in Meal:
            status = self.status_for(meal)
            payload[meal.value] = status.value if status else None
        return payload

    @classmethod
    def from_dict(cls, raw: object) -> "DayAttendance":
        """Parse a stored status triple, ignoring unknown values."""
        if not isinstance(raw, dict):
            return cls()
        return cls(**{meal.value: _parse_status(raw.get(meal.value)) for meal in Meal})


@dataclass(frozen=True)
class UserRecord:
    """Per-user attendance document."""

    username: str
    centre: str
    name: str
    diet: str | None = None
    birthday: object | None = None
    meal_attendance: dict[str, DayAttendance] = field(default_factory=dict)

    def day(self, key: str) -> DayAttendance:
        """Return the attendance for a date key, all unset when absent."""
        return self.meal_attendance.get(key, DayAttendance())


def format_date_key(day: date) -> str:
    """Format a date as the stored attendance key, e.g. ``Jul 10, 2024``."""
    return day.strftime(DATE_KEY_FORMAT)


def week_dates(day: date) -> list[date]:
    """Return the Sunday-started week containing ``day``."""
    start = day - timedelta(days=(day.weekday() + 1) % DAYS_IN_WEEK)
    return [start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]


def _parse_status(value: object) -> MealStatus | None:
    if value is None:
        return None
    try:
        return MealStatus(str(value))
    except ValueError:
        return None
