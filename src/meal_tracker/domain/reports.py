"""Domain models for attendance reports."""

from dataclasses import dataclass, field
from datetime import date

from meal_tracker.domain.attendance import Meal, MealStatus

REPORTED_STATUSES = (MealStatus.PRESENT, MealStatus.PACKED, MealStatus.LATE)


@dataclass
class Bucket:
    """Count and contributing users for one meal/status combination."""

    count: int = 0
    users: list[str] = field(default_factory=list)


@dataclass
class MealBuckets:
    """One bucket per meal."""

    breakfast: Bucket = field(default_factory=Bucket)
    lunch: Bucket = field(default_factory=Bucket)
    dinner: Bucket = field(default_factory=Bucket)

    def for_meal(self, meal: Meal) -> Bucket:
        """Return the bucket for a meal."""
        return getattr(self, meal.value)

    def buckets(self) -> list[Bucket]:
        """Return all buckets in meal order."""
        return [self.for_meal(meal) for meal in Meal]


@dataclass
class DailyReport:
    """Aggregated attendance for one centre on one date."""

    attendance_present: MealBuckets = field(default_factory=MealBuckets)
    attendance_packed: MealBuckets = field(default_factory=MealBuckets)
    attendance_late: MealBuckets = field(default_factory=MealBuckets)
    diet_counts_present: dict[str, MealBuckets] = field(default_factory=dict)
    diet_counts_packed: dict[str, MealBuckets] = field(default_factory=dict)
    diet_counts_late: dict[str, MealBuckets] = field(default_factory=dict)

    def attendance(self, status: MealStatus) -> MealBuckets:
        """Return the global buckets for a reported status."""
        return {
            MealStatus.PRESENT: self.attendance_present,
            MealStatus.PACKED: self.attendance_packed,
            MealStatus.LATE: self.attendance_late,
        }[status]

    def diet_counts(self, status: MealStatus) -> dict[str, MealBuckets]:
        """Return the diet-keyed buckets for a reported status."""
        return {
            MealStatus.PRESENT: self.diet_counts_present,
            MealStatus.PACKED: self.diet_counts_packed,
            MealStatus.LATE: self.diet_counts_late,
        }[status]


@dataclass(frozen=True)
class ReportOutcome:
    """Report together with whether the underlying fetch succeeded."""

    day: date
    centre: str
    report: DailyReport
    ok: bool = True
    error: str | None = None


@dataclass(frozen=True)
class SummaryMeal:
    """Reported buckets for one meal slot of the look-ahead summary."""

    present: Bucket
    packed: Bucket
    late: Bucket
    date: str


@dataclass(frozen=True)
class SummaryReport:
    """Look-ahead view covering the next two days."""

    lunch_next_day: SummaryMeal
    dinner_next_day: SummaryMeal
    breakfast_day_after: SummaryMeal
    lunch_day_after: SummaryMeal
    diet_counts_present: dict[str, MealBuckets]
    diet_counts_packed: dict[str, MealBuckets]
    diet_counts_late: dict[str, MealBuckets]
    diet_counts_packed_day_after: dict[str, MealBuckets]
    next_day: str
    day_after: str
    ok: bool = True


@dataclass(frozen=True)
class BirthdayInfo:
    """Birthday calendar entry."""

    initials: str
    formatted_birthday: str
    sort_key: str
