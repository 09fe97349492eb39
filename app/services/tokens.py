# file: services/tokens.py

import logging
from typing import Optional

from app.core.config import TokenWriteMode
from app.core.errors import InvalidRequest, UserNotFound
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


class TokenRegistry:
    def __init__(self, store: UserStore, write_mode: TokenWriteMode = "update"):
        self.store = store
        self.write_mode = write_mode

    async def get_token(self, user_id: str) -> Optional[str]:
        """
        Returns the user's delivery token, or None when none is on file.
        A missing token is not an error here; a missing user is.
        """
        record = await self.store.get_user(user_id)
        if record is None:
            raise UserNotFound()
        token = record.get(self.store.token_field)
        if not isinstance(token, str) or not token:
            return None
        return token

    async def set_token(self, user_id: str, token: Optional[str]) -> None:
        if not token:
            raise InvalidRequest("FCM token is required")
        await self.store.write_token(user_id, token, mode=self.write_mode)
        logger.info("Updated FCM token for user %s", user_id)
