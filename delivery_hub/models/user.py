"""
User model for authentication and role-based access.

Admins manage customers and driver accounts; drivers only read the
customer directory. Every login goes through email two-factor verification.
"""

import enum
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from delivery_hub.core.database import Base


class UserRole(str, enum.Enum):
    """
    Account roles.

    - ADMIN: full access to customers and driver accounts
    - DRIVER: read-only access to the customer directory
    """
    ADMIN = "admin"
    DRIVER = "driver"


class User(Base):
    """
    User account. Email is unique among accounts.
    """
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Authentication credentials
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    # Profile
    username = Column(String, unique=True, nullable=True)
    role = Column(Enum(UserRole), default=UserRole.DRIVER, nullable=False, index=True)

    # Account status
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    two_factor_codes = relationship("TwoFactorCode", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
