"""Sessions router: registration, login, password reset, roles, logout."""

import logging

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from storefront.domain.user import UserDomainError
from storefront.presentation.api.dependencies import (
    SESSION_COOKIE,
    AuthenticatedContext,
    CookieSignerDep,
    DBSession,
    GitHubClientDep,
    GitHubUser,
    LoggedInUser,
    PasswordResetServiceDep,
    RegisteredUser,
    SessionContextDep,
    SessionServiceDep,
    SettingsDep,
)
from storefront.presentation.api.responses import (
    send_server_error,
    send_success_message,
    send_success_payload,
    send_user_error,
)
from storefront.presentation.api.schemas import (
    ErrorResponse,
    ResetPasswordRequest,
    RestorePasswordRequest,
    SuccessMessageResponse,
    SuccessPayloadResponse,
)
from storefront_auth import AuthError, CookieSigner
from storefront_config.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

_USER_ERROR = {400: {"model": ErrorResponse, "description": "Invalid input"}}
_SERVER_ERROR = {500: {"model": ErrorResponse, "description": "Unexpected error"}}
_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Not authenticated"}}


def _set_session_cookie(
    response: Response,
    token: str,
    settings: Settings,
    signer: CookieSigner,
) -> None:
    """Store the identity token in the signed, HttpOnly session cookie."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value=signer.sign(token),
        max_age=settings.cookie_max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"model": SuccessMessageResponse},
        **_USER_ERROR,
    },
)
async def register(
    user: RegisteredUser,
    session: DBSession,
    ctx: SessionContextDep,
) -> JSONResponse:
    await session.commit()
    ctx.logger.info("User %s registered successfully", user.email)
    return send_success_message(
        "User registered successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.post(
    "/login",
    summary="Log in with email and password",
    responses={
        200: {"model": SuccessPayloadResponse},
        **_USER_ERROR,
    },
)
async def login(
    user: LoggedInUser,
    session_service: SessionServiceDep,
    signer: CookieSignerDep,
    settings: SettingsDep,
    ctx: SessionContextDep,
) -> JSONResponse:
    """
    Authenticate with email and password.

    The identity token is stored in the signed HttpOnly ``token`` cookie;
    the body carries the password-free user.
    """
    public_user = user.without_password()
    response = send_success_payload(public_user)
    _set_session_cookie(
        response,
        session_service.issue_token(public_user),
        settings,
        signer,
    )
    ctx.logger.info("Session of user %s started successfully", public_user.email)
    return response


@router.get(
    "/github",
    summary="Start the GitHub login flow",
    status_code=status.HTTP_302_FOUND,
    responses=_USER_ERROR,
)
async def github_login(github_client: GitHubClientDep) -> RedirectResponse:
    return RedirectResponse(
        github_client.build_authorization_url(),
        status_code=status.HTTP_302_FOUND,
    )


@router.get(
    "/githubcallback",
    summary="GitHub OAuth callback",
    status_code=status.HTTP_302_FOUND,
    responses=_USER_ERROR,
)
async def github_callback(
    user: GitHubUser,
    session: DBSession,
    session_service: SessionServiceDep,
    signer: CookieSignerDep,
    settings: SettingsDep,
    ctx: SessionContextDep,
) -> RedirectResponse:
    """Start a session for the GitHub user and send them to the store."""
    await session.commit()
    response = RedirectResponse(
        settings.oauth_success_redirect,
        status_code=status.HTTP_302_FOUND,
    )
    _set_session_cookie(response, session_service.issue_token(user), settings, signer)
    ctx.logger.info("Session of user %s started successfully with GitHub", user.email)
    return response


@router.post(
    "/restore",
    summary="Request a restore-password email",
    responses={
        200: {"model": SuccessMessageResponse},
        **_USER_ERROR,
        **_SERVER_ERROR,
    },
)
async def restore_password(
    request: RestorePasswordRequest,
    reset_service: PasswordResetServiceDep,
    ctx: SessionContextDep,
) -> JSONResponse:
    email = request.email
    try:
        user = await reset_service.request_reset(email)
    except (UserDomainError, AuthError) as e:
        ctx.logger.warning(e.message)
        return send_user_error(e.message)
    except Exception as e:
        ctx.logger.error("Error restoring the password of user %s: %s", email, e)
        return send_server_error(str(e))

    ctx.logger.info(
        "Email with the restore-password instructions sent to %s",
        user.email,
    )
    return send_success_message(
        f"An email has been sent to {user.email} with the instructions "
        "to restore your password",
    )


@router.post(
    "/resetpassword",
    summary="Reset the password with a reset token",
    responses={
        200: {"model": SuccessMessageResponse},
        **_USER_ERROR,
        **_SERVER_ERROR,
    },
)
async def reset_password(
    request: ResetPasswordRequest,
    reset_service: PasswordResetServiceDep,
    session: DBSession,
    ctx: SessionContextDep,
) -> JSONResponse:
    try:
        user = await reset_service.reset_password(request.token, request.password)
        await session.commit()
    except (UserDomainError, AuthError) as e:
        await session.rollback()
        ctx.logger.warning(e.message)
        return send_user_error(e.message)
    except Exception as e:
        await session.rollback()
        ctx.logger.error("Error resetting password: %s", e)
        return send_server_error(str(e))

    ctx.logger.info("Password of user %s reset successfully", user.email)
    return send_success_message("Password reset successfully")


@router.put(
    "/premium/{uid}",
    summary="Toggle a user's role between user and premium",
    responses={
        200: {"model": SuccessMessageResponse},
        **_USER_ERROR,
        **_UNAUTHORIZED,
        **_SERVER_ERROR,
    },
)
async def change_user_role(  # NOQA: PLR0913
    uid: str,
    ctx: AuthenticatedContext,
    session: DBSession,
    session_service: SessionServiceDep,
    signer: CookieSignerDep,
    settings: SettingsDep,
) -> JSONResponse:
    """
    Flip the role of user ``uid`` and re-issue the session cookie.

    The new cookie carries the updated user, so the session reflects the
    new role right away.
    """
    try:
        user, token = await session_service.change_user_role(uid)
        await session.commit()
    except UserDomainError as e:
        await session.rollback()
        ctx.logger.warning(e.message)
        return send_user_error(e.message)
    except Exception as e:
        await session.rollback()
        ctx.logger.error("Error changing the role of user %s: %s", uid, e)
        return send_server_error(str(e))

    message = f"Role of user {user.email} changed successfully to {user.role.value}"
    response = send_success_message(message)
    _set_session_cookie(response, token, settings, signer)
    ctx.logger.info(message)
    return response


@router.get(
    "/current",
    summary="Get the current session user",
    responses={
        200: {"model": SuccessPayloadResponse},
        **_UNAUTHORIZED,
    },
)
async def current(ctx: AuthenticatedContext) -> JSONResponse:
    return send_success_payload(ctx.user)


@router.get(
    "/logout",
    summary="Log out",
    responses={200: {"model": SuccessMessageResponse}},
)
async def logout(ctx: SessionContextDep) -> JSONResponse:
    """Clear the session cookie, whether or not a session exists."""
    response = send_success_message("Session closed successfully")
    _clear_session_cookie(response)
    if ctx.user is not None:
        ctx.logger.info("Session of user %s closed successfully", ctx.user.email)
    else:
        ctx.logger.info("Logout without an active session")
    return response
