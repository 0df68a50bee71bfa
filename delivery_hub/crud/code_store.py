"""
Storage for two-factor one-time codes.

Keeps at most one active (unused, unexpired) code per user by deleting
unused codes before a new one is inserted.
"""

import uuid
from datetime import timedelta
from typing import Optional
from sqlalchemy.orm import Session

from delivery_hub.core.clock import Clock, utcnow
from delivery_hub.models.two_factor_code import TwoFactorCode


class CodeStore:
    """
    Args:
        db: Database session
        clock: Returns the current UTC time (injectable for tests)
    """

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    def invalidate_active(self, user_id: uuid.UUID) -> int:
        """
        Delete every unused code for the user, expired or not.

        Returns:
            int: Number of codes deleted
        """
        deleted = self.db.query(TwoFactorCode).filter(
            TwoFactorCode.user_id == user_id,
            TwoFactorCode.used == False  # noqa: E712
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    def issue(self, user_id: uuid.UUID, code: str, ttl: timedelta) -> TwoFactorCode:
        """Insert a new unused code expiring ttl from now."""
        now = self.clock()
        two_factor_code = TwoFactorCode(
            id=uuid.uuid4(),
            user_id=user_id,
            code=code,
            expires_at=now + ttl,
            used=False,
            created_at=now,
        )
        self.db.add(two_factor_code)
        self.db.commit()
        self.db.refresh(two_factor_code)
        return two_factor_code

    def find_active(self, user_id: uuid.UUID) -> Optional[TwoFactorCode]:
        """
        Get the most recently created unused, unexpired code for a user.

        Returns:
            Optional[TwoFactorCode]: Active code or None
        """
        return self.db.query(TwoFactorCode).filter(
            TwoFactorCode.user_id == user_id,
            TwoFactorCode.used == False,  # noqa: E712
            TwoFactorCode.expires_at > self.clock()
        ).order_by(TwoFactorCode.created_at.desc()).first()

    def mark_used(self, code_id: uuid.UUID) -> bool:
        """
        Mark a code used only if it is currently unused.

        The check and the write are a single UPDATE, so when two verifications
        race on the same code exactly one of them sees True.

        Returns:
            bool: True if this call flipped the code to used
        """
        updated = self.db.query(TwoFactorCode).filter(
            TwoFactorCode.id == code_id,
            TwoFactorCode.used == False  # noqa: E712
        ).update({"used": True}, synchronize_session=False)
        self.db.commit()
        return updated == 1

    def purge_expired(self, grace: timedelta) -> int:
        """
        Delete codes that expired more than `grace` ago.

        Returns:
            int: Number of codes deleted
        """
        cutoff = self.clock() - grace
        deleted = self.db.query(TwoFactorCode).filter(
            TwoFactorCode.expires_at < cutoff
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted
