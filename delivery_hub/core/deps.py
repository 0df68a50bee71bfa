"""
FastAPI dependencies for authentication, authorization and the two-factor flow.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from uuid import UUID

from delivery_hub.core.database import get_db
from delivery_hub.core.security import decode_token, ACCESS_TOKEN_TYPE, TWO_FACTOR_TOKEN_TYPE
from delivery_hub.core.two_factor import TwoFactorFlow
from delivery_hub.crud.account import AccountStore
from delivery_hub.crud.attempt_ledger import AttemptLedger
from delivery_hub.crud.code_store import CodeStore
from delivery_hub.models.user import User
from delivery_hub.services.email_service import email_service

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer()


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_account_store(db: Session = Depends(get_db)) -> AccountStore:
    return AccountStore(db)


def get_two_factor_flow(db: Session = Depends(get_db)) -> TwoFactorFlow:
    """Build the two-factor flow for this request's database session."""
    return TwoFactorFlow(
        accounts=AccountStore(db),
        codes=CodeStore(db),
        ledger=AttemptLedger(db),
        mailer=email_service,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate the current user from an access token.

    Two-factor and refresh tokens are rejected here, so a user who only
    passed the password step cannot reach protected endpoints.

    Raises:
        HTTPException 401: If token is invalid or user not found
        HTTPException 403: If the account is inactive
    """
    try:
        payload = decode_token(credentials.credentials, expected_type=ACCESS_TOKEN_TYPE)
        user_id: str = payload.get("sub")
        if user_id is None:
            raise _credentials_exception()
        user_uuid = UUID(user_id)
    except (JWTError, ValueError):
        raise _credentials_exception()

    user = db.query(User).filter(User.id == user_uuid).first()
    if user is None:
        raise _credentials_exception()

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user


async def get_admin_user(user: User = Depends(get_current_user)) -> User:
    """
    Require the current user to be an admin.

    Raises:
        HTTPException 403: If the user is not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized: Admin access required"
        )
    return user


async def require_two_factor_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """
    Require the short-lived token issued by a successful password login.

    Returns:
        dict: The token payload
    """
    try:
        return decode_token(credentials.credentials, expected_type=TWO_FACTOR_TOKEN_TYPE)
    except JWTError:
        raise _credentials_exception()
