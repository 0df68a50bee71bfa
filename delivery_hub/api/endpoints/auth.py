"""
Authentication endpoints.

Login is two-step:
- POST /login: check email/password, receive a short-lived two-factor token
- POST /request-2fa-code: mail a 6-digit code (requires the two-factor token)
- POST /verify-2fa-code: submit the code, receive access + refresh tokens

Plus:
- POST /refresh: Get new tokens using a refresh token
- GET /me: Get current user profile
"""

import logging
import uuid
from fastapi import APIRouter, HTTPException, Depends, status
from jose import JWTError

from delivery_hub.core.deps import (
    get_account_store,
    get_current_user,
    get_two_factor_flow,
    require_two_factor_token,
)
from delivery_hub.core.security import (
    create_access_token,
    create_refresh_token,
    create_two_factor_token,
    decode_token,
    REFRESH_TOKEN_TYPE,
)
from delivery_hub.core.two_factor import CODE_TTL, TwoFactorFlow, TwoFactorOutcome
from delivery_hub.crud.account import AccountStore
from delivery_hub.models.user import User
from delivery_hub.schemas.two_factor import (
    LoginRequest,
    LoginResponse,
    RequestCodeRequest,
    SendCodeResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from delivery_hub.schemas.user import TokenResponse, TokenRefreshRequest, UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


def _issue_tokens(user: User) -> TokenResponse:
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    refresh_token = create_refresh_token(data={"sub": str(user.id)})
    return TokenResponse(access_token=access_token, refresh_token=refresh_token, token_type="bearer")


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    accounts: AccountStore = Depends(get_account_store)
):
    """
    Check primary credentials.

    Returns a two-factor token only; API tokens are issued by /verify-2fa-code.
    """
    user = accounts.verify_password(request.email, request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"Password accepted for {user.email}, awaiting second factor")

    return LoginResponse(
        two_factor_token=create_two_factor_token(data={"sub": str(user.id), "email": user.email})
    )


@router.post("/request-2fa-code", response_model=SendCodeResponse)
def request_two_factor_code(
    request: RequestCodeRequest,
    _token: dict = Depends(require_two_factor_token),
    flow: TwoFactorFlow = Depends(get_two_factor_flow)
):
    """
    Generate a code and email it.

    An email without an account gets the same success response.

    Raises:
        HTTPException 429: Rate limit exceeded
        HTTPException 502: Email could not be delivered
    """
    result = flow.request_code(request.email)
    expires_in_minutes = int(CODE_TTL.total_seconds() // 60)

    if result.outcome == TwoFactorOutcome.RATE_LIMITED:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many attempts. Please try again later."
        )

    if result.outcome == TwoFactorOutcome.DISPATCH_FAILED:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send verification code"
        )

    # Same body whether or not the account exists
    return SendCodeResponse(
        success=True,
        message="If an account exists, a verification code has been sent to your email",
        expires_in_minutes=expires_in_minutes
    )


@router.post("/verify-2fa-code", response_model=VerifyCodeResponse)
def verify_two_factor_code(
    request: VerifyCodeRequest,
    flow: TwoFactorFlow = Depends(get_two_factor_flow),
    accounts: AccountStore = Depends(get_account_store)
):
    """
    Verify a code and issue API tokens.

    Raises:
        HTTPException 429: Too many failed verifications
        HTTPException 401: Wrong, expired or already used code (indistinguishable)
    """
    result = flow.verify_code(request.email, request.code)

    if result.outcome == TwoFactorOutcome.RATE_LIMITED:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many verification attempts. Please request a new code."
        )

    if result.outcome != TwoFactorOutcome.VERIFIED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid verification code"
        )

    user = accounts.record_login(accounts.get(result.user_id))

    tokens = _issue_tokens(user)
    logger.info(f"User logged in: {user.email} (role: {user.role.value})")

    return VerifyCodeResponse(
        user_id=str(user.id),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserResponse.model_validate(user)
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(
    request: TokenRefreshRequest,
    accounts: AccountStore = Depends(get_account_store)
):
    """
    Exchange a refresh token for a new access/refresh pair.
    """
    try:
        payload = decode_token(request.refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        user_id = uuid.UUID(payload.get("sub"))
    except (JWTError, TypeError, ValueError) as e:
        logger.error(f"Token refresh error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        )

    # Verify user still exists and is active
    user = accounts.get(user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(
    current_user: User = Depends(get_current_user)
):
    """
    Get current authenticated user's profile.
    """
    return current_user
