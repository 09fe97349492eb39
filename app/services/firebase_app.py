# file: services/firebase_app.py

import logging

import firebase_admin
from firebase_admin import credentials

from app.core.config import Settings
from app.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def initialize_firebase(settings: Settings) -> firebase_admin.App:
    """
    Initializes the Firebase Admin SDK from the configured service account and
    returns the app handle. Raises ConfigurationError if the credential is unusable.
    """
    if firebase_admin._apps:
        logger.info("Firebase Admin SDK already initialized.")
        return firebase_admin.get_app()

    try:
        cred = credentials.Certificate(settings.service_account_info or settings.service_account_path)
    except (ValueError, OSError) as e:
        raise ConfigurationError(f"Invalid Firebase service account credential: {e}") from e

    options = {}
    if settings.database_url:
        options["databaseURL"] = settings.database_url

    app = firebase_admin.initialize_app(cred, options or None)
    logger.info("Firebase Admin SDK initialized for project %s.", cred.project_id)
    return app
