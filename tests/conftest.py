"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from uuid import uuid4

import pytest

from meal_tracker.adapters.push_client import PushClient
from meal_tracker.config import Settings
from meal_tracker.containers import AppContainer
from meal_tracker.domain.attendance import DayAttendance, Meal, MealStatus, UserRecord
from meal_tracker.domain.centres import Centre, CentreMember, DietInfo, Role
from meal_tracker.domain.chat import ChatMessage, ChatReply
from meal_tracker.services.attendance import AttendanceRepository, AttendanceService
from meal_tracker.services.birthdays import BirthdayService
from meal_tracker.services.centres import CentreRepository, CentreService
from meal_tracker.services.chat import ChatFeed, ChatRepository, ChatService
from meal_tracker.services.diets import DietRepository, DietService
from meal_tracker.services.push import PushService
from meal_tracker.services.reports import ReportRepository, ReportService


@dataclass
class InMemoryUserRepository(AttendanceRepository, ReportRepository):
    """In-memory user records for attendance and report tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    fail_reads: bool = False

    def add(self, record: UserRecord) -> UserRecord:
        self.users[record.username] = record
        return record

    def get_user(self, username: str) -> UserRecord | None:
        return self.users.get(username)

    def insert_user(self, record: UserRecord) -> None:
        self.users[record.username] = record

    def update_profile(  # noqa: PLR0913
        self,
        username: str,
        diet: str | None,
        centre: str,
        name: str,
        birthday: date | None,
    ) -> None:
        current = self.users[username]
        self.users[username] = replace(
            current,
            diet=diet,
            centre=centre,
            name=name,
            birthday=birthday.isoformat() if birthday else current.birthday,
        )

    def replace_attendance(
        self, username: str, meal_attendance: dict[str, DayAttendance]
    ) -> bool:
        if username not in self.users:
            return False
        self.users[username] = replace(
            self.users[username], meal_attendance=dict(meal_attendance)
        )
        return True

    def set_meal_status(
        self, username: str, date_key: str, meal: Meal, status: MealStatus | None
    ) -> bool:
        current = self.users.get(username)
        if current is None:
            return False
        attendance = dict(current.meal_attendance)
        attendance[date_key] = current.day(date_key).with_status(meal, status)
        self.users[username] = replace(current, meal_attendance=attendance)
        return True

    def list_users_for_centre(self, centre: str) -> list[UserRecord]:
        if self.fail_reads:
            raise ConnectionError("database unavailable")
        return [record for record in self.users.values() if record.centre == centre]


@dataclass
class InMemoryCentreRepository(CentreRepository):
    """In-memory centres and members for tests."""

    centres: dict[str, Centre] = field(default_factory=dict)
    members: dict[str, CentreMember] = field(default_factory=dict)

    def list_centres(self) -> list[Centre]:
        return list(self.centres.values())

    def get_centre(self, centre_id: str) -> Centre | None:
        return self.centres.get(centre_id)

    def list_members(self, centre_id: str) -> list[CentreMember]:
        return [m for m in self.members.values() if m.centre_id == centre_id]

    def get_member(self, centre_id: str, member_id: str) -> CentreMember | None:
        member = self.members.get(member_id)
        if member and member.centre_id == centre_id:
            return member
        return None

    def create_member(
        self, centre_id: str, payload: dict[str, object]
    ) -> CentreMember:
        member = CentreMember(
            id=str(uuid4()),
            centre_id=centre_id,
            name=str(payload["name"]),
            role=Role(str(payload.get("role", "carer"))),
            diet=payload.get("diet"),
            birthday=_to_date(payload.get("birthday")),
            password=payload.get("password"),
        )
        self.members[member.id] = member
        return member

    def update_member(
        self, centre_id: str, member_id: str, changes: dict[str, object]
    ) -> CentreMember | None:
        member = self.get_member(centre_id, member_id)
        if member is None:
            return None
        values = dict(changes)
        if "role" in values:
            values["role"] = Role(str(values["role"]))
        if "birthday" in values:
            values["birthday"] = _to_date(values["birthday"])
        updated = replace(member, **values)
        self.members[member_id] = updated
        return updated

    def delete_member(self, centre_id: str, member_id: str) -> bool:
        if self.get_member(centre_id, member_id) is None:
            return False
        del self.members[member_id]
        return True


@dataclass
class InMemoryDietRepository(DietRepository):
    """In-memory diets for tests."""

    diets: list[DietInfo] = field(default_factory=list)

    def list_diets(self) -> list[DietInfo]:
        return list(self.diets)


@dataclass
class InMemoryChatRepository(ChatRepository):
    """In-memory chat messages for tests."""

    messages: dict[str, ChatMessage] = field(default_factory=dict)

    def list_recent(self, limit: int, author_id: str | None) -> list[ChatMessage]:
        visible = [
            message
            for message in self.messages.values()
            if author_id is None or message.author_id == author_id
        ]
        visible.sort(key=lambda message: message.created_at, reverse=True)
        return visible[:limit]

    def get_message(self, message_id: str) -> ChatMessage | None:
        return self.messages.get(message_id)

    def create_message(
        self, author_id: str, author_name: str, text: str, created_at: datetime
    ) -> ChatMessage:
        message = ChatMessage(
            id=str(uuid4()),
            author_id=author_id,
            author_name=author_name,
            text=text,
            created_at=created_at,
        )
        self.messages[message.id] = message
        return message

    def append_reply(self, message_id: str, reply: ChatReply) -> ChatMessage:
        message = self.messages[message_id]
        updated = replace(message, replies=[*message.replies, reply])
        self.messages[message_id] = updated
        return updated

    def delete_message(self, message_id: str) -> None:
        self.messages.pop(message_id, None)


@dataclass
class FakePushClient(PushClient):
    """Fake push client that records subscriptions."""

    subscriptions: list[tuple[str, object]] = field(default_factory=list)

    async def subscribe(self, user_id: str, subscription: object) -> None:
        self.subscriptions.append((user_id, subscription))


def _to_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        return date.fromisoformat(value)
    return value if isinstance(value, date) else None


def make_user(  # noqa: PLR0913
    username: str,
    centre: str = "c1",
    diet: str | None = None,
    attendance: dict[str, DayAttendance] | None = None,
    name: str | None = None,
    birthday: object | None = None,
) -> UserRecord:
    return UserRecord(
        username=username,
        centre=centre,
        name=name or username,
        diet=diet,
        birthday=birthday,
        meal_attendance=attendance or {},
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def centre_repository() -> InMemoryCentreRepository:
    repository = InMemoryCentreRepository()
    repository.centres["c1"] = Centre(id="c1", name="Victoria", code="1234")
    return repository


@pytest.fixture
def chat_repository() -> InMemoryChatRepository:
    return InMemoryChatRepository()


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    centre_repository: InMemoryCentreRepository,
    chat_repository: InMemoryChatRepository,
    push_client: FakePushClient,
) -> AppContainer:
    attendance_service = AttendanceService(user_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        attendance_service=attendance_service,
        report_service=ReportService(user_repository),
        birthday_service=BirthdayService(user_repository),
        centre_service=CentreService(
            repository=centre_repository, attendance_service=attendance_service
        ),
        diet_service=DietService(
            InMemoryDietRepository(
                [DietInfo(id="veg", name="Vegetarian", description="No meat")]
            )
        ),
        chat_service=ChatService(repository=chat_repository, feed=ChatFeed()),
        push_service=PushService(push_client),
        close_resources=close_resources,
    )
