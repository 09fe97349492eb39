# file: main.py

import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.controllers.notification import router as notification_router
from app.controllers.token import router as token_router
from app.controllers.version import router as version_router
from app.core.config import load_settings
from app.core.context import build_context
from app.core.errors import register_error_handlers
from app.core.logging_config import setup_logging
from app.services.firebase_app import initialize_firebase

logger = logging.getLogger(__name__)

app = FastAPI(title="Chat Push Relay")
app.state.context = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(notification_router, prefix="/api", tags=["notifications"])
app.include_router(token_router, prefix="/api/user", tags=["tokens"])
app.include_router(version_router, prefix="/api/app", tags=["version"])


@app.get("/")
async def root():
    return {
        "message": "Chat Push Relay API",
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.on_event("startup")
async def startup_event():
    # A missing or broken credential raises here and aborts startup.
    if app.state.context is not None:
        return
    settings = load_settings()
    setup_logging(settings.log_level)
    firebase_app = initialize_firebase(settings)
    app.state.context = build_context(settings, firebase_app)
    logger.info("Chat Push Relay ready (token backend: %s, sender names: %s)",
                settings.token_backend, settings.sender_name_strategy)


if __name__ == "__main__":
    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)
