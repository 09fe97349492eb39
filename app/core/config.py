# file: core/config.py

import json
import os
from pathlib import Path
from typing import List, Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

from app.core.errors import ConfigurationError
from app.models.version import DEFAULT_VERSION_DESCRIPTOR, VersionDescriptor

TokenBackend = Literal["firestore", "realtime"]
SenderNameStrategy = Literal["caller", "lookup"]
TokenWriteMode = Literal["update", "upsert", "require_existing"]


class Settings(BaseModel):
    """
    Immutable runtime configuration, built once by load_settings() at startup
    and handed to everything that needs it.
    """
    service_account_info: Optional[dict] = None
    service_account_path: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Record store
    token_backend: TokenBackend = "firestore"
    database_url: Optional[str] = None
    users_collection: str = "users"
    token_field: str = "fcmToken"
    token_updated_field: str = "lastTokenUpdate"
    display_name_field: str = "username"
    token_write_mode: TokenWriteMode = "update"

    # Notification shaping
    sender_name_strategy: SenderNameStrategy = "lookup"
    sender_name_placeholders: List[str] = ["User", "Unknown"]
    default_notification_title: str = "New Message"
    unknown_sender_label: str = "Unknown"
    android_channel_id: str = "chat_messages"

    external_timeout_seconds: float = 10.0
    version: VersionDescriptor = DEFAULT_VERSION_DESCRIPTOR

    model_config = ConfigDict(frozen=True)


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _load_service_account(env: Mapping[str, str]) -> dict:
    raw = env.get("FIREBASE_SERVICE_ACCOUNT_KEY")
    path = env.get("FIREBASE_SERVICE_ACCOUNT_PATH")
    if raw:
        try:
            info = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON: {e}") from e
        if not isinstance(info, dict):
            raise ConfigurationError("FIREBASE_SERVICE_ACCOUNT_KEY must be a JSON object")
        return {"service_account_info": info}
    if path:
        if not Path(path).is_file():
            raise ConfigurationError(f"Service account file not found: {path}")
        return {"service_account_path": path}
    raise ConfigurationError(
        "FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH environment variable is required"
    )


def _load_version_descriptor(path: str) -> VersionDescriptor:
    try:
        return VersionDescriptor.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise ConfigurationError(f"Could not load version descriptor from {path}: {e}") from e


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Reads the relay configuration from the environment (and a .env file when
    reading the real process environment).

    Raises ConfigurationError when the Firebase credential is missing or any
    value is invalid; the process must not serve traffic in that case.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    values = _load_service_account(environ)

    mapping = {
        "HOST": "host",
        "PORT": "port",
        "LOG_LEVEL": "log_level",
        "TOKEN_BACKEND": "token_backend",
        "FIREBASE_DATABASE_URL": "database_url",
        "USERS_COLLECTION": "users_collection",
        "TOKEN_FIELD": "token_field",
        "DISPLAY_NAME_FIELD": "display_name_field",
        "TOKEN_WRITE_MODE": "token_write_mode",
        "SENDER_NAME_STRATEGY": "sender_name_strategy",
        "DEFAULT_NOTIFICATION_TITLE": "default_notification_title",
        "UNKNOWN_SENDER_LABEL": "unknown_sender_label",
        "ANDROID_CHANNEL_ID": "android_channel_id",
        "EXTERNAL_TIMEOUT_SECONDS": "external_timeout_seconds",
    }
    for env_name, field in mapping.items():
        value = environ.get(env_name)
        if value:
            values[field] = value

    placeholders = _split_csv(environ.get("SENDER_NAME_PLACEHOLDERS"))
    if placeholders is not None:
        values["sender_name_placeholders"] = placeholders

    version_file = environ.get("APP_VERSION_FILE")
    if version_file:
        values["version"] = _load_version_descriptor(version_file)

    try:
        settings = Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if settings.token_backend == "realtime" and not settings.database_url:
        raise ConfigurationError("FIREBASE_DATABASE_URL is required when TOKEN_BACKEND=realtime")
    return settings
