# file: controllers/version.py

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.core.context import AppContext, get_context
from app.models.version import VersionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/version", response_model=VersionResponse)
async def check_app_version(context: AppContext = Depends(get_context)):
    """
    Tells clients which build is current and where to download the latest one.
    """
    try:
        descriptor = context.settings.version
        return VersionResponse(**descriptor.model_dump())
    except Exception as e:
        logger.exception("Error checking app version")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Failed to check app version", "error": str(e)},
        )
