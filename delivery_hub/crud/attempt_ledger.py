"""
Attempt ledger backing the two-factor rate limits.

Rows are only ever appended or purged by age, never updated.
"""

import logging
from datetime import timedelta
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from delivery_hub.core.clock import Clock, utcnow
from delivery_hub.models.failed_login_attempt import FailedLoginAttempt, AttemptType

logger = logging.getLogger(__name__)


class AttemptLedger:
    """
    Append-only record of attempts per identifier.

    Args:
        db: Database session
        clock: Returns the current UTC time (injectable for tests)
    """

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    def record_attempt(self, identifier: str, attempt_type: AttemptType = AttemptType.VERIFY_FAILED) -> None:
        """
        Append an attempt for the identifier.

        Best-effort: a persistence failure is logged and never reaches the caller.
        """
        now = self.clock()
        try:
            self.db.add(FailedLoginAttempt(
                identifier=identifier,
                attempt_type=attempt_type,
                attempt_time=now,
                created_at=now,
            ))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to record {attempt_type.value} attempt for {identifier}: {e}")

    def count_recent(
        self,
        identifier: str,
        window: timedelta,
        attempt_type: Optional[AttemptType] = None
    ) -> int:
        """
        Count attempts for the identifier with attempt_time >= now - window.

        Args:
            identifier: Rate-limiting key (raw email)
            window: Look-back window
            attempt_type: Only count this kind of attempt (default: all kinds)
        """
        since = self.clock() - window
        query = self.db.query(func.count(FailedLoginAttempt.id)).filter(
            FailedLoginAttempt.identifier == identifier,
            FailedLoginAttempt.attempt_time >= since
        )
        if attempt_type is not None:
            query = query.filter(FailedLoginAttempt.attempt_type == attempt_type)
        return query.scalar() or 0

    def purge_older_than(self, age: timedelta) -> int:
        """
        Delete attempts with attempt_time < now - age.

        Idempotent. Returns the number of rows deleted.
        """
        cutoff = self.clock() - age
        deleted = self.db.query(FailedLoginAttempt).filter(
            FailedLoginAttempt.attempt_time < cutoff
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted
