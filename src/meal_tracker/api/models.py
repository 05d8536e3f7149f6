"""Pydantic models for API request payloads."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from meal_tracker.domain.attendance import DayAttendance, Meal, MealStatus
from meal_tracker.domain.centres import Role


class DayAttendancePayload(BaseModel):
    """Status triple for one date."""

    breakfast: MealStatus | None = None
    lunch: MealStatus | None = None
    dinner: MealStatus | None = None

    def to_domain(self) -> DayAttendance:
        """Convert to the domain value."""
        return DayAttendance(
            breakfast=self.breakfast, lunch=self.lunch, dinner=self.dinner
        )


class AttendanceWeekPayload(BaseModel):
    """Whole attendance map keyed by stored date key."""

    meal_attendance: dict[str, DayAttendancePayload]


class MealStatusPatch(BaseModel):
    """Single-cell attendance update."""

    day: date
    meal: Meal
    status: MealStatus | None = None


class SignInPayload(BaseModel):
    """Centre sign-in request."""

    code: str
    member_id: str
    password: str | None = None


class ChatMessagePayload(BaseModel):
    """New chat message or reply."""

    author_id: str
    author_name: str = ""
    text: str = Field(min_length=1)
    reply_to: str | None = None


class PushSubscribePayload(BaseModel):
    """Browser push subscription registration."""

    model_config = ConfigDict(populate_by_name=True)

    push_subscription: dict[str, object] | str = Field(alias="pushSubscription")
    user_id: str = Field(alias="userId")


class MemberPayload(BaseModel):
    """Centre member fields for create and update."""

    name: str | None = None
    role: Role | None = None
    diet: str | None = None
    birthday: str | None = None
    password: str | None = None
