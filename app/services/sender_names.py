# file: services/sender_names.py

import logging
from typing import Iterable, Optional, Protocol

from app.core.errors import RelayError
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


class SenderNameResolver(Protocol):
    async def resolve(self, sender_id: str, sender_name: Optional[str]) -> str:
        ...


class CallerSenderNameResolver:
    """Trusts whatever name the caller supplied."""

    def __init__(self, default_title: str = "New Message"):
        self.default_title = default_title

    async def resolve(self, sender_id: str, sender_name: Optional[str]) -> str:
        return sender_name or self.default_title


class StoreSenderNameResolver:
    """
    Uses the caller's name unless it is missing or a known placeholder, in which
    case the sender's own record is consulted. Never fails: an unreadable record
    falls back to the unknown-sender label.
    """

    def __init__(self, store: UserStore, placeholders: Iterable[str] = (), unknown_label: str = "Unknown"):
        self.store = store
        self.placeholders = {name.strip().casefold() for name in placeholders}
        self.unknown_label = unknown_label

    def _is_usable(self, name: Optional[str]) -> bool:
        return bool(name and name.strip()) and name.strip().casefold() not in self.placeholders

    async def resolve(self, sender_id: str, sender_name: Optional[str]) -> str:
        if self._is_usable(sender_name):
            return sender_name

        try:
            record = await self.store.get_user(sender_id)
        except RelayError as e:
            logger.warning("Sender lookup for %s failed: %s", sender_id, e)
            return self.unknown_label
        except Exception:
            logger.exception("Unexpected error looking up sender %s", sender_id)
            return self.unknown_label

        name = (record or {}).get(self.store.display_name_field)
        if isinstance(name, str) and name.strip():
            return name
        return self.unknown_label
