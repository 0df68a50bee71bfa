"""
Append-only ledger of two-factor attempts, used for rate limiting.

The identifier is the raw email the caller supplied, not a user id, so
lookups for emails without an account are throttled too.
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum, Index, func
from sqlalchemy.dialects.postgresql import UUID
from delivery_hub.core.database import Base


class AttemptType(str, enum.Enum):
    """
    - VERIFY_FAILED: a rejected code verification (unknown account, no active code, wrong code)
    - CODE_REQUEST: a code was issued for the identifier
    """
    VERIFY_FAILED = "verify_failed"
    CODE_REQUEST = "code_request"


class FailedLoginAttempt(Base):
    __tablename__ = "failed_login_attempts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    identifier = Column(String, nullable=False)
    attempt_type = Column(Enum(AttemptType), nullable=False, default=AttemptType.VERIFY_FAILED)
    attempt_time = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_failed_login_attempts_identifier', 'identifier'),
        Index('idx_failed_login_attempts_time', 'attempt_time'),
    )

    def __repr__(self):
        return f"<FailedLoginAttempt(identifier='{self.identifier}', type={self.attempt_type.value}, attempt_time={self.attempt_time})>"
