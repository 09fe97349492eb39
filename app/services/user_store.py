# file: services/user_store.py

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import firebase_admin
from fastapi.concurrency import run_in_threadpool
from firebase_admin import db as realtime_db
from firebase_admin import firestore, firestore_async

from app.core.config import Settings, TokenWriteMode
from app.core.errors import InternalFault, UserNotFound

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    """Keyed access to per-user records holding the delivery token."""

    token_field: str
    display_name_field: str

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        ...

    async def write_token(self, user_id: str, token: str, mode: TokenWriteMode = "update") -> None:
        ...


async def _bounded(awaitable, timeout: float, action: str):
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise InternalFault(f"Record store timed out while trying to {action}") from e


class FirestoreUserStore:
    """User records as documents in a Firestore collection, keyed by user id."""

    def __init__(self, client, collection: str = "users", token_field: str = "fcmToken",
                 token_updated_field: str = "lastTokenUpdate", display_name_field: str = "username",
                 timeout: float = 10.0):
        self.client = client
        self.collection = collection
        self.token_field = token_field
        self.token_updated_field = token_updated_field
        self.display_name_field = display_name_field
        self.timeout = timeout

    def _document(self, user_id: str):
        return self.client.collection(self.collection).document(user_id)

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        snapshot = await _bounded(self._document(user_id).get(), self.timeout, "read user")
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    async def write_token(self, user_id: str, token: str, mode: TokenWriteMode = "update") -> None:
        fields = {
            self.token_field: token,
            self.token_updated_field: firestore.SERVER_TIMESTAMP,
        }
        document = self._document(user_id)
        if mode == "require_existing" and await self.get_user(user_id) is None:
            raise UserNotFound()
        if mode == "upsert":
            await _bounded(document.set(fields, merge=True), self.timeout, "write token")
        else:
            # Plain update: Firestore rejects it when the document does not exist.
            await _bounded(document.update(fields), self.timeout, "write token")


class RealtimeDatabaseUserStore:
    """User records as children of a Realtime Database node, keyed by user id."""

    SERVER_TIMESTAMP = {".sv": "timestamp"}

    def __init__(self, root: str = "users", token_field: str = "fcmToken",
                 token_updated_field: str = "lastTokenUpdate", display_name_field: str = "username",
                 timeout: float = 10.0, app: Optional[firebase_admin.App] = None):
        self.root = root
        self.token_field = token_field
        self.token_updated_field = token_updated_field
        self.display_name_field = display_name_field
        self.timeout = timeout
        self.app = app

    def _reference(self, user_id: str):
        return realtime_db.reference(f"{self.root}/{user_id}", app=self.app)

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        value = await _bounded(run_in_threadpool(self._reference(user_id).get), self.timeout, "read user")
        if value is None:
            return None
        if not isinstance(value, dict):
            logger.warning("Record for user %s is not an object, ignoring its contents.", user_id)
            return {}
        return value

    async def write_token(self, user_id: str, token: str, mode: TokenWriteMode = "update") -> None:
        if mode == "require_existing" and await self.get_user(user_id) is None:
            raise UserNotFound()
        # Realtime Database updates always create missing parents, so update and upsert coincide.
        fields = {self.token_field: token, self.token_updated_field: self.SERVER_TIMESTAMP}
        await _bounded(run_in_threadpool(self._reference(user_id).update, fields), self.timeout, "write token")


def create_user_store(settings: Settings, app: Optional[firebase_admin.App] = None) -> UserStore:
    common = dict(
        token_field=settings.token_field,
        token_updated_field=settings.token_updated_field,
        display_name_field=settings.display_name_field,
        timeout=settings.external_timeout_seconds,
    )
    if settings.token_backend == "realtime":
        return RealtimeDatabaseUserStore(root=settings.users_collection, app=app, **common)
    return FirestoreUserStore(firestore_async.client(app), collection=settings.users_collection, **common)
