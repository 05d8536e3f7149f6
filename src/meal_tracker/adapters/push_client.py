"""Push notification backend client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class PushClient(Protocol):
    """Interface for the push subscription endpoint."""

    async def subscribe(self, user_id: str, subscription: object) -> None:
        """Send a subscription for a user to the push backend."""


@dataclass
class HttpxPushClient:
    """Push client implemented with httpx."""

    subscribe_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, subscribe_url: str) -> "HttpxPushClient":
        """Create a push client with a managed httpx session."""
        return cls(subscribe_url=subscribe_url, http_client=httpx.AsyncClient())

    async def subscribe(self, user_id: str, subscription: object) -> None:
        """Post the subscription and user id to the subscribe endpoint."""
        payload: dict[str, object] = {
            "pushSubscription": subscription,
            "userId": user_id,
        }
        response = await self.http_client.post(
            self.subscribe_url, json=payload, timeout=10
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
