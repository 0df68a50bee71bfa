"""
One-time codes for email two-factor authentication.

At most one code per user is active (unused and unexpired) at any time.
This is enforced by the code store deleting unused codes before issuing a
new one, not by a database constraint.
"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from delivery_hub.core.database import Base


class TwoFactorCode(Base):
    """
    A 6-digit code sent to a user's email after the password step.

    Lifecycle:
    - created when a code is requested
    - marked used on a matching verification
    - deleted when superseded by a newer request, or by cleanup one hour after expiry
    """
    __tablename__ = "two_factor_codes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="two_factor_codes")

    __table_args__ = (
        Index('idx_two_factor_codes_user_id', 'user_id'),
        Index('idx_two_factor_codes_expires_at', 'expires_at'),
    )

    def __repr__(self):
        return f"<TwoFactorCode(user_id={self.user_id}, expires_at={self.expires_at}, used={self.used})>"
