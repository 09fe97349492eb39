# file: models/token.py

from pydantic import BaseModel
from typing import Optional


class TokenUpdate(BaseModel):
    fcmToken: Optional[str] = None


class TokenResponse(BaseModel):
    userId: str
    fcmToken: Optional[str] = None


class TokenUpdateResponse(BaseModel):
    success: bool = True
    message: str = "FCM token updated successfully"
