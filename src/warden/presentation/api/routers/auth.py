"""Authentication router: signup, verification, login, refresh and reset."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from warden.presentation.api.dependencies import DBSession, IdentitySvc
from warden.presentation.api.exception_handlers import error_response
from warden.presentation.api.schemas import (
    AccessTokenResponse,
    AccountResponse,
    EmailRequest,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    ResetPasswordRequest,
    SignupRequest,
    VerifyRequest,
)
from warden_identity import Err, Ok

logger = logging.getLogger(__name__)

router = APIRouter()


def _errors(*codes: int) -> dict[int | str, dict]:
    return {code: {"model": ErrorResponse} for code in codes}


@router.post(
    "/signup",
    response_model=AccountResponse,
    summary="Register a new account",
    responses=_errors(400, 409),
)
async def signup(
    request: SignupRequest,
    identity: IdentitySvc,
    session: DBSession,
) -> AccountResponse | JSONResponse:
    """
    Register a disabled account and email it a verification code.

    An unverified account holding the same email or name is replaced.
    """
    match await identity.signup(
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        password=request.password,
    ):
        case Ok(value=account):
            await session.commit()
            return AccountResponse.from_account(account)
        case Err() as err:
            await session.rollback()
            return error_response(err)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Authenticate with email and password",
    responses=_errors(401, 403, 404),
)
async def login(
    request: LoginRequest,
    identity: IdentitySvc,
) -> LoginResponse | JSONResponse:
    """Return an access token and a refresh token for a verified account."""
    match await identity.authenticate(request.email, request.password):
        case Ok(value=tokens):
            return LoginResponse(
                access_token=tokens.access_token,
                access_token_expires_at=tokens.access_expires_at,
                refresh_token=tokens.refresh_token,
                refresh_token_expires_at=tokens.refresh_expires_at,
            )
        case Err() as err:
            return error_response(err)


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    summary="Refresh the access token",
    responses=_errors(401, 404),
)
async def refresh(
    request: RefreshRequest,
    identity: IdentitySvc,
) -> AccessTokenResponse | JSONResponse:
    """Issue a new access token. The refresh token itself is not rotated."""
    match await identity.refresh_access_token(request.refresh_token):
        case Ok(value=issued):
            return AccessTokenResponse(
                access_token=issued.token,
                expires_at=issued.expires_at,
            )
        case Err() as err:
            return error_response(err)


@router.post(
    "/verify",
    response_model=MessageResponse,
    summary="Verify an account",
    responses=_errors(400, 404, 409),
)
async def verify(
    request: VerifyRequest,
    identity: IdentitySvc,
    session: DBSession,
) -> MessageResponse | JSONResponse:
    match await identity.verify_account(request.email, request.code):
        case Ok():
            await session.commit()
            return MessageResponse(message="Account verified successfully")
        case Err() as err:
            await session.rollback()
            return error_response(err)


@router.post(
    "/resend",
    response_model=MessageResponse,
    summary="Resend the verification code",
    responses=_errors(404, 409),
)
async def resend(
    request: EmailRequest,
    identity: IdentitySvc,
    session: DBSession,
) -> MessageResponse | JSONResponse:
    match await identity.resend_verification_code(request.email):
        case Ok():
            await session.commit()
            return MessageResponse(message="Verification code sent")
        case Err() as err:
            await session.rollback()
            return error_response(err)


@router.post(
    "/request-password-reset",
    response_model=MessageResponse,
    summary="Request a password reset link",
    responses=_errors(404),
)
async def request_password_reset(
    request: EmailRequest,
    identity: IdentitySvc,
    session: DBSession,
) -> MessageResponse | JSONResponse:
    """Email a single-use reset link to a verified account."""
    match await identity.request_password_reset(request.email):
        case Ok():
            await session.commit()
            return MessageResponse(message="Password reset link sent")
        case Err() as err:
            await session.rollback()
            return error_response(err)


@router.patch(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset the password with a reset token",
    responses=_errors(400),
)
async def reset_password(
    request: ResetPasswordRequest,
    identity: IdentitySvc,
    session: DBSession,
) -> MessageResponse | JSONResponse:
    match await identity.reset_password(request.token, request.new_password):
        case Ok():
            await session.commit()
            return MessageResponse(message="Password has been reset")
        case Err() as err:
            await session.rollback()
            return error_response(err)
