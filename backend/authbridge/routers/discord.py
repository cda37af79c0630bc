"""
Discord OAuth router for trading authorization codes for tokens.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from authbridge.schemas.cognito import ErrorResponse
from authbridge.schemas.discord import DiscordOAuthRequest
from authbridge.services.discord_oauth import (
    DiscordOAuthClient,
    DiscordOAuthError,
    DiscordToken,
    get_discord_client,
)

router = APIRouter(prefix="/api/v1/discord", tags=["Discord"])


@router.post(
    "/oauth",
    response_model=DiscordToken,
    summary="Exchange a Discord authorization code",
)
async def discord_oauth(
    body: DiscordOAuthRequest,
    discord: Annotated[DiscordOAuthClient, Depends(get_discord_client)],
):
    """
    Trade the code from the Discord consent screen for an OAuth access token.

    - **code**: Authorization code (required)
    """
    if not body.code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(message="access code: 'code' is required").model_dump(
                exclude_none=True
            ),
        )

    try:
        return await discord.exchange_code(body.code)
    except DiscordOAuthError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=ErrorResponse(message=f"failed to exchange code: {e}").model_dump(
                exclude_none=True
            ),
        )
