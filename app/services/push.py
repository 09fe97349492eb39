# file: services/push.py

import asyncio
import logging
from typing import Optional, Protocol

import firebase_admin
from fastapi.concurrency import run_in_threadpool
from firebase_admin import exceptions, messaging

from app.core.errors import DeliveryFailed
from app.models.notification import NotificationPayload

logger = logging.getLogger(__name__)


class PushGateway(Protocol):
    async def send(self, payload: NotificationPayload) -> str:
        """Hands the payload to the delivery service and returns its receipt id."""
        ...


def build_fcm_message(payload: NotificationPayload) -> messaging.Message:
    return messaging.Message(
        token=payload.token,
        notification=messaging.Notification(title=payload.title, body=payload.body),
        data=dict(payload.data),
        android=messaging.AndroidConfig(
            priority=payload.android.priority,
            notification=messaging.AndroidNotification(
                channel_id=payload.android.channel_id,
                priority=payload.android.notification_priority,
                default_sound=payload.android.default_sound,
                default_vibrate_timings=payload.android.default_vibrate_timings,
            ),
        ),
    )


class FcmPushGateway:
    """Sends notifications through Firebase Cloud Messaging."""

    def __init__(self, app: Optional[firebase_admin.App] = None, timeout: float = 10.0):
        self.app = app
        self.timeout = timeout

    async def send(self, payload: NotificationPayload) -> str:
        message = build_fcm_message(payload)
        try:
            return await asyncio.wait_for(
                run_in_threadpool(messaging.send, message, app=self.app),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise DeliveryFailed(details=f"FCM did not answer within {self.timeout} seconds") from e
        except exceptions.FirebaseError as e:
            logger.error("FCM rejected notification (%s): %s", e.code, e)
            raise DeliveryFailed(details=str(e)) from e
        except (ValueError, OSError) as e:
            # Malformed message arguments or a transport failure before FCM answered.
            raise DeliveryFailed(details=str(e)) from e
