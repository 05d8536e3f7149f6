"""Push notification registration."""

import logging
from dataclasses import dataclass

from meal_tracker.adapters.push_client import PushClient

logger = logging.getLogger(__name__)


@dataclass
class PushService:
    """Forward browser push subscriptions to the notification backend."""

    client: PushClient

    async def register(self, user_id: str, subscription: object) -> None:
        """Register a push subscription or token for a user."""
        if not user_id:
            raise ValueError("user_id is required")
        await self.client.subscribe(user_id=user_id, subscription=subscription)
        logger.info("Registered push subscription", extra={"user_id": user_id})
