"""FastAPI application factory."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import date

import httpx
from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, StreamingResponse

from meal_tracker.api.admin import router as admin_router
from meal_tracker.api.models import (
    AttendanceWeekPayload,
    ChatMessagePayload,
    MealStatusPatch,
    PushSubscribePayload,
    SignInPayload,
)
from meal_tracker.app_logging import configure_logging
from meal_tracker.containers import AppContainer
from meal_tracker.domain.centres import CentreMember, Role
from meal_tracker.domain.chat import ChatEvent
from meal_tracker.domain.errors import (
    InvalidCentreCodeError,
    InvalidPasswordError,
    MealTrackerError,
    RecordNotFoundError,
)
from meal_tracker.services.chat import ChatFeed

CHAT_KEEPALIVE_SECONDS = 15


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(MealTrackerError)
    async def domain_error_handler(
        request: Request, exc: MealTrackerError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_status_for(exc), content={"detail": str(exc)}
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/centres")
    async def list_centres(request: Request) -> dict[str, object]:
        """Return centres for the centre picker."""
        state_container: AppContainer = request.app.state.container
        centres = state_container.centre_service.list_centres()
        return {
            "centres": [{"id": centre.id, "name": centre.name} for centre in centres]
        }

    @app.get("/centres/{centre_id}/members")
    async def list_members(centre_id: str, request: Request) -> dict[str, object]:
        """Return the sign-in picker entries for a centre."""
        state_container: AppContainer = request.app.state.container
        members = state_container.centre_service.list_members(centre_id)
        return {"members": [_picker_entry(member) for member in members]}

    @app.post("/centres/{centre_id}/sign-in")
    async def sign_in(
        centre_id: str, payload: SignInPayload, request: Request
    ) -> dict[str, object]:
        """Sign a member in and make sure their attendance record exists."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.centre_service.sign_in(
            centre_id,
            code=payload.code,
            member_id=payload.member_id,
            password=payload.password,
        )
        return {"profile": profile}

    @app.get("/users/{username}/attendance")
    async def read_attendance(username: str, request: Request) -> dict[str, object]:
        """Return a user's attendance record."""
        state_container: AppContainer = request.app.state.container
        record = state_container.attendance_service.read(username)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"user": record}

    @app.put("/users/{username}/attendance", status_code=status.HTTP_204_NO_CONTENT)
    async def replace_attendance(
        username: str, payload: AttendanceWeekPayload, request: Request
    ) -> Response:
        """Overwrite a user's whole attendance map."""
        state_container: AppContainer = request.app.state.container
        state_container.attendance_service.replace_attendance(
            username,
            {key: day.to_domain() for key, day in payload.meal_attendance.items()},
        )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.patch("/users/{username}/attendance", status_code=status.HTTP_204_NO_CONTENT)
    async def set_meal_status(
        username: str, payload: MealStatusPatch, request: Request
    ) -> Response:
        """Update a single date/meal cell."""
        state_container: AppContainer = request.app.state.container
        state_container.attendance_service.set_meal_status(
            username, payload.day, payload.meal, payload.status
        )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/reports/daily")
    async def daily_report(centre: str, day: date, request: Request) -> Response:
        """Return the aggregated report; 503 when the data could not be read."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.report_service.aggregate(day, centre)
        return JSONResponse(
            status_code=(
                status.HTTP_200_OK
                if outcome.ok
                else status.HTTP_503_SERVICE_UNAVAILABLE
            ),
            content=jsonable_encoder(outcome),
        )

    @app.get("/reports/summary")
    async def summary_report(centre: str, day: date, request: Request) -> Response:
        """Return the look-ahead summary for the two days after ``day``."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.report_service.summary(day, centre)
        return JSONResponse(
            status_code=(
                status.HTTP_200_OK
                if summary.ok
                else status.HTTP_503_SERVICE_UNAVAILABLE
            ),
            content=jsonable_encoder(summary),
        )

    @app.get("/reports/users")
    async def user_report(
        centre: str, day: date, request: Request
    ) -> dict[str, object]:
        """Return each user's status triple for ``day``."""
        state_container: AppContainer = request.app.state.container
        users = state_container.report_service.user_attendance_for_date(day, centre)
        return {"day": day, "users": users}

    @app.get("/reports/birthdays")
    async def birthdays(centre: str, request: Request) -> dict[str, object]:
        """Return the centre birthday calendar."""
        state_container: AppContainer = request.app.state.container
        return {
            "birthdays": state_container.birthday_service.birthdays_for_centre(centre)
        }

    @app.get("/diets")
    async def list_diets(request: Request) -> dict[str, object]:
        """Return the diet catalogue."""
        state_container: AppContainer = request.app.state.container
        return {"diets": state_container.diet_service.list_diets()}

    @app.get("/chats")
    async def list_chats(
        viewer_id: str, request: Request, role: Role | None = None
    ) -> dict[str, object]:
        """Return chat messages visible to the viewer."""
        state_container: AppContainer = request.app.state.container
        messages = state_container.chat_service.list_messages(viewer_id, role)
        return {"messages": messages}

    @app.post("/chats", status_code=status.HTTP_201_CREATED)
    async def send_chat(
        payload: ChatMessagePayload, request: Request
    ) -> dict[str, object]:
        """Post a chat message or a reply."""
        state_container: AppContainer = request.app.state.container
        message = state_container.chat_service.send(
            author_id=payload.author_id,
            author_name=payload.author_name,
            text=payload.text,
            reply_to=payload.reply_to,
        )
        return {"message": message}

    @app.delete("/chats/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_chat(message_id: str, request: Request) -> Response:
        """Delete a chat message with all of its replies."""
        state_container: AppContainer = request.app.state.container
        state_container.chat_service.delete(message_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/chats/stream")
    async def chat_stream(request: Request) -> StreamingResponse:
        """Stream chat changes as server-sent events."""
        state_container: AppContainer = request.app.state.container
        return StreamingResponse(
            stream_chat_events(
                state_container.chat_service.feed, request.is_disconnected
            ),
            media_type="text/event-stream",
        )

    @app.post("/push/subscribe", status_code=status.HTTP_202_ACCEPTED)
    async def push_subscribe(
        payload: PushSubscribePayload, request: Request
    ) -> dict[str, str]:
        """Forward a push subscription to the notification backend."""
        state_container: AppContainer = request.app.state.container
        try:
            await state_container.push_service.register(
                payload.user_id, payload.push_subscription
            )
        except httpx.HTTPError as exc:
            logger.exception(
                "Failed to register push subscription",
                extra={"user_id": payload.user_id},
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Push registration failed",
            ) from exc
        return {"status": "accepted"}

    return app


async def stream_chat_events(
    feed: ChatFeed,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float = CHAT_KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """Yield server-sent event frames for one subscriber until it disconnects.

    The subscription is taken on first iteration so a response that is
    never streamed leaves no queue behind.
    """
    queue = feed.subscribe()
    try:
        while not await is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield format_chat_event(event)
    finally:
        feed.unsubscribe(queue)


def format_chat_event(event: ChatEvent) -> str:
    """Format a chat event as a server-sent event frame."""
    data = json.dumps(jsonable_encoder(event))
    return f"event: {event.kind}\ndata: {data}\n\n"


def _status_for(exc: MealTrackerError) -> int:
    if isinstance(exc, RecordNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidCentreCodeError | InvalidPasswordError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_422_UNPROCESSABLE_ENTITY


def _picker_entry(member: CentreMember) -> dict[str, object]:
    return {
        "id": member.id,
        "name": member.name,
        "role": member.role.value,
        "diet": member.diet,
    }
