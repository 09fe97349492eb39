# file: services/dispatch.py

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from app.core.errors import InvalidRequest, RecipientNotFound, TokenUnavailable
from app.models.notification import AndroidHints, NotificationPayload, NotificationRequest
from app.services.push import PushGateway
from app.services.sender_names import SenderNameResolver
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

BODY_PREVIEW_LENGTH = 50
ELLIPSIS = "..."
REQUIRED_FIELDS = ("receiverId", "senderId", "message")


def truncate_body(message: str, limit: int = BODY_PREVIEW_LENGTH) -> str:
    if len(message) > limit:
        return message[:limit] + ELLIPSIS
    return message


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_payload(request: NotificationRequest, token: str, title: str, channel_id: str,
                  sent_at: datetime) -> NotificationPayload:
    return NotificationPayload(
        token=token,
        title=title,
        body=truncate_body(request.message),
        data={
            "chatRoomId": request.chatRoomId or "",
            "senderId": request.senderId,
            "senderName": title,
            "message": request.message,
            "timestamp": sent_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        },
        android=AndroidHints(channel_id=channel_id),
    )


class NotificationDispatcher:
    """Resolves the recipient's token, shapes the notification and hands it to the push gateway."""

    def __init__(self, store: UserStore, gateway: PushGateway, names: SenderNameResolver,
                 channel_id: str = "chat_messages", clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.gateway = gateway
        self.names = names
        self.channel_id = channel_id
        self.clock = clock or _utc_now

    async def dispatch(self, request: NotificationRequest) -> str:
        """Sends one notification and returns the delivery receipt id."""
        if not all(getattr(request, field) for field in REQUIRED_FIELDS):
            raise InvalidRequest(f"Missing required fields: {', '.join(REQUIRED_FIELDS)}")

        record = await self.store.get_user(request.receiverId)
        if record is None:
            raise RecipientNotFound()

        token = record.get(self.store.token_field)
        if not isinstance(token, str) or not token:
            raise TokenUnavailable()

        title = await self.names.resolve(request.senderId, request.senderName)
        payload = build_payload(request, token, title, self.channel_id, self.clock())

        receipt_id = await self.gateway.send(payload)
        logger.info("Notification sent successfully to %s: %s", request.receiverId, receipt_id)
        return receipt_id
