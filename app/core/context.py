# file: core/context.py

from dataclasses import dataclass
from typing import Optional

import firebase_admin
from fastapi import Request

from app.core.config import Settings
from app.core.errors import InternalFault
from app.services.dispatch import NotificationDispatcher
from app.services.push import FcmPushGateway, PushGateway
from app.services.sender_names import CallerSenderNameResolver, SenderNameResolver, StoreSenderNameResolver
from app.services.tokens import TokenRegistry
from app.services.user_store import UserStore, create_user_store


@dataclass(frozen=True)
class AppContext:
    """Everything a handler needs, built once at startup."""
    settings: Settings
    store: UserStore
    gateway: PushGateway
    names: SenderNameResolver

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return NotificationDispatcher(self.store, self.gateway, self.names,
                                      channel_id=self.settings.android_channel_id)

    @property
    def tokens(self) -> TokenRegistry:
        return TokenRegistry(self.store, write_mode=self.settings.token_write_mode)


def create_sender_name_resolver(settings: Settings, store: UserStore) -> SenderNameResolver:
    if settings.sender_name_strategy == "caller":
        return CallerSenderNameResolver(default_title=settings.default_notification_title)
    return StoreSenderNameResolver(store, placeholders=settings.sender_name_placeholders,
                                   unknown_label=settings.unknown_sender_label)


def build_context(settings: Settings, firebase_app: Optional[firebase_admin.App] = None) -> AppContext:
    store = create_user_store(settings, app=firebase_app)
    gateway = FcmPushGateway(app=firebase_app, timeout=settings.external_timeout_seconds)
    return AppContext(
        settings=settings,
        store=store,
        gateway=gateway,
        names=create_sender_name_resolver(settings, store),
    )


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise InternalFault("Service is not initialized")
    return context
