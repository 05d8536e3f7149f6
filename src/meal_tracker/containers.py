"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_tracker.adapters.push_client import HttpxPushClient
from meal_tracker.adapters.supabase_centre_repository import SupabaseCentreRepository
from meal_tracker.adapters.supabase_chat_repository import SupabaseChatRepository
from meal_tracker.adapters.supabase_diet_repository import SupabaseDietRepository
from meal_tracker.adapters.supabase_report_repository import (
    SupabaseReportRepository,
)
from meal_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from meal_tracker.config import Settings
from meal_tracker.services.attendance import AttendanceService
from meal_tracker.services.birthdays import BirthdayService
from meal_tracker.services.centres import CentreService
from meal_tracker.services.chat import ChatFeed, ChatService
from meal_tracker.services.diets import DietService
from meal_tracker.services.push import PushService
from meal_tracker.services.reports import ReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    attendance_service: AttendanceService
    report_service: ReportService
    birthday_service: BirthdayService
    centre_service: CentreService
    diet_service: DietService
    chat_service: ChatService
    push_service: PushService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    report_repository = SupabaseReportRepository(supabase_client)
    attendance_service = AttendanceService(SupabaseUserRepository(supabase_client))
    centre_service = CentreService(
        repository=SupabaseCentreRepository(supabase_client),
        attendance_service=attendance_service,
    )
    chat_service = ChatService(
        repository=SupabaseChatRepository(supabase_client),
        feed=ChatFeed(),
        history_limit=resolved_settings.chat_history_limit,
    )
    push_client = HttpxPushClient.create(resolved_settings.push_subscribe_url)

    async def close_resources() -> None:
        await push_client.close()

    return AppContainer(
        settings=resolved_settings,
        attendance_service=attendance_service,
        report_service=ReportService(report_repository),
        birthday_service=BirthdayService(report_repository),
        centre_service=centre_service,
        diet_service=DietService(SupabaseDietRepository(supabase_client)),
        chat_service=chat_service,
        push_service=PushService(push_client),
        close_resources=close_resources,
    )
