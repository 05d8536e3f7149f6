"""Attendance report aggregation for a centre."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from meal_tracker.domain.attendance import (
    DayAttendance,
    Meal,
    MealStatus,
    UserRecord,
    format_date_key,
)
from meal_tracker.domain.reports import (
    REPORTED_STATUSES,
    DailyReport,
    MealBuckets,
    ReportOutcome,
    SummaryMeal,
    SummaryReport,
)

logger = logging.getLogger(__name__)

SUMMARY_DATE_FORMAT = "%b %d"


class ReportRepository(Protocol):
    """Read interface over user records for reporting."""

    def list_users_for_centre(self, centre: str) -> list[UserRecord]:
        """Return every user record belonging to a centre."""


@dataclass
class ReportService:
    """Service producing daily and look-ahead attendance reports."""

    repository: ReportRepository

    def aggregate(self, day: date, centre: str) -> ReportOutcome:
        """Fold each centre user's status for ``day`` into report buckets.

        Fetch failures are logged and returned as ``ok=False`` with an
        all-zero report so callers can still render an empty view.
        """
        try:
            records = self.repository.list_users_for_centre(centre)
        except Exception as exc:
            logger.exception(
                "Failed to load users for report",
                extra={"centre": centre, "day": day.isoformat()},
            )
            return ReportOutcome(
                day=day,
                centre=centre,
                report=DailyReport(),
                ok=False,
                error=f"{type(exc).__name__}: {exc}",
            )
        return ReportOutcome(
            day=day, centre=centre, report=build_report(records, format_date_key(day))
        )

    def user_attendance_for_date(
        self, day: date, centre: str
    ) -> dict[str, DayAttendance]:
        """Return each centre user's status triple for ``day``."""
        date_key = format_date_key(day)
        return {
            record.username: record.day(date_key)
            for record in self.repository.list_users_for_centre(centre)
        }

    def summary(self, day: date, centre: str) -> SummaryReport:
        """Return the look-ahead view for the two days after ``day``."""
        next_day = day + timedelta(days=1)
        day_after = day + timedelta(days=2)
        next_outcome = self.aggregate(next_day, centre)
        after_outcome = self.aggregate(day_after, centre)
        next_report = next_outcome.report
        after_report = after_outcome.report
        next_label = next_day.strftime(SUMMARY_DATE_FORMAT)
        after_label = day_after.strftime(SUMMARY_DATE_FORMAT)

        diets: dict[str, None] = {}
        for report in (next_report, after_report):
            for status in REPORTED_STATUSES:
                diets.update(dict.fromkeys(report.diet_counts(status)))

        def diet_table(status: MealStatus) -> dict[str, MealBuckets]:
            table = {}
            for diet in diets:
                next_buckets = next_report.diet_counts(status).get(diet, MealBuckets())
                after_buckets = after_report.diet_counts(status).get(
                    diet, MealBuckets()
                )
                table[diet] = MealBuckets(
                    breakfast=after_buckets.breakfast,
                    lunch=next_buckets.lunch,
                    dinner=next_buckets.dinner,
                )
            return table

        return SummaryReport(
            lunch_next_day=_summary_meal(next_report, Meal.LUNCH, next_label),
            dinner_next_day=_summary_meal(next_report, Meal.DINNER, next_label),
            breakfast_day_after=_summary_meal(
                after_report, Meal.BREAKFAST, after_label
            ),
            lunch_day_after=_summary_meal(after_report, Meal.LUNCH, after_label),
            diet_counts_present=diet_table(MealStatus.PRESENT),
            diet_counts_packed=diet_table(MealStatus.PACKED),
            diet_counts_late=diet_table(MealStatus.LATE),
            diet_counts_packed_day_after=after_report.diet_counts_packed,
            next_day=next_label,
            day_after=after_label,
            ok=next_outcome.ok and after_outcome.ok,
        )


def build_report(records: list[UserRecord], date_key: str) -> DailyReport:
    """Aggregate user records for one date key into a report."""
    report = DailyReport()
    for record in records:
        attendance = record.day(date_key)
        for meal in Meal:
            status = attendance.status_for(meal)
            if status not in REPORTED_STATUSES:
                continue
            report.attendance(status).for_meal(meal).users.append(record.username)
            if record.diet:
                diet_buckets = report.diet_counts(status).setdefault(
                    record.diet, MealBuckets()
                )
                diet_buckets.for_meal(meal).users.append(record.username)

    for status in REPORTED_STATUSES:
        _finalize_counts(report.attendance(status))
        for diet_buckets in report.diet_counts(status).values():
            _finalize_counts(diet_buckets)
    return report


def _finalize_counts(buckets: MealBuckets) -> None:
    for bucket in buckets.buckets():
        bucket.count = len(bucket.users)


def _summary_meal(report: DailyReport, meal: Meal, label: str) -> SummaryMeal:
    return SummaryMeal(
        present=report.attendance_present.for_meal(meal),
        packed=report.attendance_packed.for_meal(meal),
        late=report.attendance_late.for_meal(meal),
        date=label,
    )
