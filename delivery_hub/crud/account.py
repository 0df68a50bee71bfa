"""
Account store: user lookup, password authentication and admin management.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session

from delivery_hub.core.config import settings
from delivery_hub.core.security import verify_password, get_password_hash
from delivery_hub.models.user import User, UserRole

logger = logging.getLogger(__name__)


class AccountStore:
    """Repository for User accounts."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str, active_only: bool = True) -> Optional[User]:
        """Find an account by exact email. Inactive accounts are skipped unless active_only is False."""
        query = self.db.query(User).filter(User.email == email)
        if active_only:
            query = query.filter(User.is_active == True)  # noqa: E712
        return query.first()

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get(self, user_id: uuid.UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def verify_password(self, email: str, password: str) -> Optional[User]:
        """
        Check an email/password pair.

        Returns:
            Optional[User]: The active account on success, None otherwise
        """
        user = self.find_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    def record_login(self, user: User) -> User:
        """Stamp last_login_at after a completed two-factor login."""
        user.last_login_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        query = self.db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        return query.order_by(User.email).all()

    def create(
        self,
        email: str,
        password: str,
        role: UserRole = UserRole.DRIVER,
        username: Optional[str] = None
    ) -> User:
        """
        Create an account.

        The configured INITIAL_ADMIN_EMAIL is always created as an admin.
        Callers check email/username uniqueness first.
        """
        if settings.INITIAL_ADMIN_EMAIL and email.lower() == settings.INITIAL_ADMIN_EMAIL.lower():
            role = UserRole.ADMIN

        user = User(
            id=uuid.uuid4(),
            email=email,
            hashed_password=get_password_hash(password),
            username=username or None,
            role=role,
            is_active=True,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Account created: {user.email} (role: {user.role.value})")
        return user

    def update(
        self,
        user: User,
        email: Optional[str] = None,
        password: Optional[str] = None,
        username: Optional[str] = None
    ) -> User:
        """
        Update credentials and profile.

        None leaves a field untouched; an empty username clears it.
        """
        if email:
            user.email = email
        if password:
            user.hashed_password = get_password_hash(password)
        if username is not None:
            user.username = username or None

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        """Delete an account and its two-factor codes."""
        self.db.delete(user)
        self.db.commit()
