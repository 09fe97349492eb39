# file: controllers/token.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.core.context import AppContext, get_context
from app.core.errors import InternalFault, RelayError
from app.models.token import TokenResponse, TokenUpdate, TokenUpdateResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}/token", response_model=TokenResponse)
async def get_user_token(user_id: str, context: AppContext = Depends(get_context)):
    """
    Returns the user's FCM token, or null if the user exists but has none.
    """
    try:
        token = await context.tokens.get_token(user_id)
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Error getting user token")
        raise InternalFault("Failed to get user token", details=str(e)) from e
    return TokenResponse(userId=user_id, fcmToken=token)


@router.post("/{user_id}/token", response_model=TokenUpdateResponse)
async def update_user_token(
        user_id: str,
        payload: Optional[TokenUpdate] = None,
        context: AppContext = Depends(get_context),
):
    try:
        await context.tokens.set_token(user_id, (payload or TokenUpdate()).fcmToken)
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Error updating user token")
        raise InternalFault("Failed to update user token", details=str(e)) from e
    return TokenUpdateResponse()
