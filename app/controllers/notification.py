# file: controllers/notification.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.core.context import AppContext, get_context
from app.core.errors import InternalFault, RelayError
from app.models.notification import NotificationRequest, SendNotificationResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send-notification", response_model=SendNotificationResponse)
async def send_notification(
        payload: Optional[NotificationRequest] = None,
        context: AppContext = Depends(get_context),
):
    """
    Sends a chat-message push notification to the receiver's registered device.
    """
    try:
        message_id = await context.dispatcher.dispatch(payload or NotificationRequest())
    except RelayError as e:
        logger.error("Error sending notification: %s", e.details or e.message)
        raise
    except Exception as e:
        logger.exception("Unexpected error sending notification")
        raise InternalFault("Failed to send notification", details=str(e)) from e
    return SendNotificationResponse(messageId=message_id)
