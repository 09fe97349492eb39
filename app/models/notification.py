# file: models/notification.py

from pydantic import BaseModel, ConfigDict
from typing import Dict, Optional


class NotificationRequest(BaseModel):
    # Required fields are checked by the dispatcher so a missing one is a 400, not a 422.
    receiverId: Optional[str] = None
    senderId: Optional[str] = None
    senderName: Optional[str] = None
    message: Optional[str] = None
    chatRoomId: Optional[str] = None


class AndroidHints(BaseModel):
    priority: str = "high"
    channel_id: str
    notification_priority: str = "high"
    default_sound: bool = True
    default_vibrate_timings: bool = True

    model_config = ConfigDict(frozen=True)


class NotificationPayload(BaseModel):
    token: str
    title: str
    body: str
    data: Dict[str, str]
    android: AndroidHints

    model_config = ConfigDict(frozen=True)


class SendNotificationResponse(BaseModel):
    success: bool = True
    messageId: str
    message: str = "Notification sent successfully"
