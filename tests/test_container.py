"""Tests for container wiring."""

import asyncio

from meal_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.attendance_service is not None
    assert container.chat_service.history_limit == settings.chat_history_limit
    asyncio.run(container.close_resources())
