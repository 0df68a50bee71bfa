"""
Admin API endpoints for managing driver and admin accounts.

All endpoints require an access token for an admin account.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status

from delivery_hub.core.deps import get_account_store, get_admin_user
from delivery_hub.crud.account import AccountStore
from delivery_hub.models.user import User, UserRole
from delivery_hub.schemas.user import UserCreateRequest, UserUpdateRequest, UserResponse

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


@router.get("/users", response_model=List[UserResponse])
def list_users(
    role: Optional[UserRole] = None,
    accounts: AccountStore = Depends(get_account_store),
    admin_user: User = Depends(get_admin_user)
):
    """List accounts, optionally only those with the given role."""
    return accounts.list_users(role=role)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    request: UserCreateRequest,
    accounts: AccountStore = Depends(get_account_store),
    admin_user: User = Depends(get_admin_user)
):
    """
    Create a driver or admin account.

    Raises:
        HTTPException 400: Email or username already in use
    """
    if accounts.find_by_email(request.email, active_only=False):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    if request.username and accounts.find_by_username(request.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken"
        )

    user = accounts.create(
        email=request.email,
        password=request.password,
        role=request.role,
        username=request.username
    )
    logger.info(f"Admin {admin_user.email} created {user.role.value} account {user.email}")
    return user


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UUID,
    request: UserUpdateRequest,
    accounts: AccountStore = Depends(get_account_store),
    admin_user: User = Depends(get_admin_user)
):
    """
    Update an account's email, password or username.

    Raises:
        HTTPException 404: User not found
        HTTPException 400: Email or username already in use
    """
    user = accounts.get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if request.email and request.email != user.email:
        if accounts.find_by_email(request.email, active_only=False):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

    if request.username and request.username != user.username:
        if accounts.find_by_username(request.username):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already taken"
            )

    user = accounts.update(
        user,
        email=request.email,
        password=request.password,
        username=request.username
    )
    logger.info(f"Admin {admin_user.email} updated account {user_id}")
    return user


@router.delete("/users/{user_id}")
def delete_user(
    user_id: UUID,
    accounts: AccountStore = Depends(get_account_store),
    admin_user: User = Depends(get_admin_user)
):
    """
    Delete an account and its two-factor codes.

    Raises:
        HTTPException 404: User not found
        HTTPException 400: Admin tried to delete their own account
    """
    user = accounts.get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if user.id == admin_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )

    accounts.delete(user)
    logger.info(f"Admin {admin_user.email} deleted user {user_id}")
    return {"message": f"User {user_id} deleted successfully"}
