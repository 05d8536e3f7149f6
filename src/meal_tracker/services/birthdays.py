"""Birthday calendar for centre users."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime

from meal_tracker.domain.errors import InvalidBirthdayError
from meal_tracker.domain.reports import BirthdayInfo
from meal_tracker.services.reports import ReportRepository

logger = logging.getLogger(__name__)

LEGACY_DATE_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%m/%d/%Y", "%d %b %Y")


@dataclass
class BirthdayService:
    """Service listing centre birthdays in calendar order."""

    repository: ReportRepository

    def birthdays_for_centre(self, centre: str) -> list[BirthdayInfo]:
        """Return birthdays of centre users sorted by month and day."""
        entries = []
        for record in self.repository.list_users_for_centre(centre):
            if not record.name or record.birthday is None:
                continue
            birthday = normalize_birthday(record.birthday)
            if birthday is None:
                logger.warning(
                    "Skipping unparseable birthday",
                    extra={"username": record.username, "birthday": record.birthday},
                )
                continue
            entries.append(
                BirthdayInfo(
                    initials=initials(record.name),
                    formatted_birthday=f"{birthday:%b %d}",
                    sort_key=f"{birthday:%m-%d}",
                )
            )
        return sorted(entries, key=lambda entry: entry.sort_key)


def initials(name: str) -> str:
    """Return two-letter initials for a display name."""
    tokens = name.split()
    if not tokens:
        return ""
    if len(tokens) == 1:
        return tokens[0][:2].upper()
    return f"{tokens[0][0]}{tokens[-1][0]}".upper()


def normalize_birthday(value: object) -> date | None:
    """Read a stored birthday in any of its legacy shapes."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, dict) and "seconds" in value:
        return _from_timestamp(value["seconds"])
    if isinstance(value, int | float) and not isinstance(value, bool):
        return _from_timestamp(value)
    if isinstance(value, str):
        return _parse_string(value.strip())
    return None


def parse_birthday(value: object) -> date:
    """Validate a birthday on write, raising when it cannot be read."""
    birthday = normalize_birthday(value)
    if birthday is None:
        raise InvalidBirthdayError(f"Invalid birthday: {value!r}")
    return birthday


def _from_timestamp(seconds: object) -> date | None:
    try:
        return datetime.fromtimestamp(float(seconds), tz=UTC).date()
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _parse_string(raw: str) -> date | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass
    for fmt in LEGACY_DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    return None
