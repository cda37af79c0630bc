"""
User pool router for user creation, token refresh, and account status.
"""
import logging
from typing import NoReturn

from fastapi import APIRouter, HTTPException, status

from authbridge.core.errors import DirectoryError, OperationCancelled
from authbridge.dependencies.directory import Directory, LifecycleManager, RequestContext
from authbridge.models.outcome import (
    REASON_ALREADY_EXISTS,
    Failed,
    Provisioned,
    Rejected,
)
from authbridge.schemas.cognito import (
    AuthRequest,
    AuthResponse,
    CognitoUserResponse,
    CreateUserRequest,
    CredentialsResponse,
    ErrorResponse,
    UserExistsRequest,
    UserExistsResponse,
    UserResponse,
    UserStatusRequest,
    UserStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/cognito", tags=["Cognito"])


def raise_for_failure(outcome: Failed) -> NoReturn:
    """Translate a failed outcome into an HTTP error without leaking secrets."""
    if outcome.cause == "inconsistent":
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ErrorResponse(
                message=f"{outcome.operation} left principal {outcome.principal_id} "
                        f"partially updated",
                step=outcome.step,
            ).model_dump(exclude_none=True),
        )
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=ErrorResponse(
            message=f"{outcome.operation} could not complete: {outcome.cause}",
            step=outcome.step,
        ).model_dump(exclude_none=True),
    )


def directory_unavailable(e: DirectoryError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=ErrorResponse(message=f"user pool unavailable during {e.operation}").model_dump(
            exclude_none=True
        ),
    )


@router.post(
    "/create-user",
    response_model=CognitoUserResponse,
    summary="Create a pool user after Discord OAuth",
)
async def create_user(
    body: CreateUserRequest,
    manager: LifecycleManager,
    directory: Directory,
    ctx: RequestContext,
):
    """
    Create a pool user for a Discord account and return its first session.

    If the user already exists it is re-enabled and its credentials are
    rotated, so the client always leaves with a fresh refresh token.

    - **discordId**: Discord user id (pool username)
    - **discordUsername**: Discord username
    - **discordEmail**: Discord email address
    """
    outcome = await manager.provision(
        body.discord_id, body.discord_username, body.discord_email, ctx=ctx
    )

    if isinstance(outcome, Provisioned):
        return CognitoUserResponse(
            discord_id=outcome.identity.principal_id,
            discord_username=outcome.identity.display_name,
            email=outcome.identity.email,
            account_enabled=outcome.identity.enabled,
            credentials=CredentialsResponse.from_credential(outcome.credential),
        )
    if isinstance(outcome, Failed):
        raise_for_failure(outcome)
    if outcome.reason != REASON_ALREADY_EXISTS:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=ErrorResponse(message=outcome.reason).model_dump(exclude_none=True),
        )

    logger.info(f"Principal {body.discord_id} already exists, re-enabling and rotating")
    try:
        enabled = await ctx.run(
            body.discord_id, "provision", "enable_user",
            directory.enable_user, body.discord_id,
        )
    except OperationCancelled as e:
        raise_for_failure(Failed.from_error(e, body.discord_id, "provision"))
    except DirectoryError as e:
        raise directory_unavailable(e)
    if not enabled:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=ErrorResponse(
                message=f"user with discord id: {body.discord_id} already exists "
                        f"and could not be re-enabled",
            ).model_dump(exclude_none=True),
        )

    rotated = await manager.rotate(body.discord_id, ctx=ctx)
    if isinstance(rotated, Failed):
        raise_for_failure(rotated)

    return CognitoUserResponse(
        discord_id=body.discord_id,
        discord_username=body.discord_username,
        email=body.discord_email,
        account_enabled=True,
        credentials=CredentialsResponse.from_credential(rotated.credential),
    )


@router.post(
    "/auth",
    response_model=AuthResponse,
    summary="Exchange a refresh token for an access token",
)
async def authenticate(
    body: AuthRequest,
    manager: LifecycleManager,
    ctx: RequestContext,
):
    """
    Authenticate with a pool refresh token to receive a new access token.

    The refresh token is the one returned by create-user.
    """
    outcome = await manager.authenticate(body.discord_id, body.refresh_token, ctx=ctx)

    if isinstance(outcome, Rejected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorResponse(message="user unauthorized").model_dump(exclude_none=True),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(outcome, Failed):
        raise_for_failure(outcome)

    return AuthResponse(
        access_token=outcome.credential.access_token.get_secret_value(),
        token_expiration=outcome.credential.expires_in_seconds,
        account_enabled=outcome.identity.enabled if outcome.identity else None,
    )


@router.get(
    "/users/{discord_id}",
    response_model=UserResponse,
    summary="Get a pool user",
)
async def get_user(discord_id: str, directory: Directory):
    """Retrieve a pool user by Discord id."""
    try:
        identity = await directory.find_user(discord_id)
    except DirectoryError as e:
        raise directory_unavailable(e)

    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ErrorResponse(
                message=f"user with id: {discord_id} does not exist"
            ).model_dump(exclude_none=True),
        )
    return UserResponse.from_identity(identity)


@router.post(
    "/user-exists",
    response_model=UserExistsResponse,
    summary="Check whether a pool user exists and is enabled",
)
async def user_exists(body: UserExistsRequest, directory: Directory):
    """Check if the user exists and is enabled."""
    try:
        identity = await directory.find_user(body.discord_id)
    except DirectoryError as e:
        raise directory_unavailable(e)

    return UserExistsResponse(
        user_exists=identity is not None,
        user_enabled=identity is not None and identity.enabled,
    )


@router.post(
    "/user-status",
    response_model=UserStatusResponse,
    summary="Enable or disable a pool user",
)
async def user_status(body: UserStatusRequest, directory: Directory):
    """Change a user's status to enabled or disabled."""
    try:
        if body.account_enabled:
            ok = await directory.enable_user(body.discord_id)
        else:
            ok = await directory.disable_user(body.discord_id)
    except DirectoryError as e:
        raise directory_unavailable(e)

    if not ok:
        action = "enable" if body.account_enabled else "disable"
        logger.error(f"Failed to {action} principal {body.discord_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ErrorResponse(
                message=f"failed to {action} user with cognito"
            ).model_dump(exclude_none=True),
        )

    return UserStatusResponse(account_enabled=body.account_enabled)
