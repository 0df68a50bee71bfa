"""
Database models package.
"""

from delivery_hub.models.user import User, UserRole
from delivery_hub.models.customer import Customer
from delivery_hub.models.two_factor_code import TwoFactorCode
from delivery_hub.models.failed_login_attempt import FailedLoginAttempt, AttemptType

__all__ = ["User", "UserRole", "Customer", "TwoFactorCode", "FailedLoginAttempt", "AttemptType"]
