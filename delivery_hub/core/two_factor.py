"""
Email two-factor authentication flow.

After the password step a user requests a 6-digit code by email, then submits
it for verification. Both steps are rate limited through the attempt ledger:

- requesting: 5 ledger entries per identifier in 15 minutes
- verifying: 10 failed verifications per identifier in 5 minutes

Every verification rejection looks the same to the caller ("invalid code");
the real reason is only logged.
"""

import hmac
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Callable, Optional
from sqlalchemy.exc import SQLAlchemyError

from delivery_hub.crud.account import AccountStore
from delivery_hub.crud.attempt_ledger import AttemptLedger
from delivery_hub.crud.code_store import CodeStore
from delivery_hub.models.failed_login_attempt import AttemptType
from delivery_hub.services.email_service import TWO_FACTOR_SUBJECT, build_two_factor_html

logger = logging.getLogger(__name__)

# Policy constants
CODE_LENGTH = 6
CODE_TTL = timedelta(minutes=10)
REQUEST_WINDOW = timedelta(minutes=15)
MAX_REQUEST_ATTEMPTS = 5
VERIFY_WINDOW = timedelta(minutes=5)
MAX_VERIFY_ATTEMPTS = 10
CODE_GRACE_PERIOD = timedelta(hours=1)
ATTEMPT_RETENTION = timedelta(hours=24)


def generate_two_factor_code() -> str:
    """
    Generate a 6-digit code, uniform over 000000-999999.

    Uses the secrets module so codes can't be predicted from earlier ones.
    """
    return ''.join(secrets.choice('0123456789') for _ in range(CODE_LENGTH))


def codes_match(stored: str, candidate: str) -> bool:
    """Constant-time comparison of a stored code and a submitted one."""
    return hmac.compare_digest(stored.encode('utf-8'), candidate.encode('utf-8'))


class TwoFactorOutcome(str, Enum):
    SENT = "sent"
    DISPATCH_FAILED = "dispatch_failed"
    VERIFIED = "verified"
    INVALID = "invalid"
    RATE_LIMITED = "rate_limited"


@dataclass
class TwoFactorResult:
    outcome: TwoFactorOutcome
    user_id: Optional[uuid.UUID] = None


class TwoFactorFlow:
    """
    Orchestrates code issuance and verification.

    All collaborators are injected; the flow holds no state of its own
    between calls.

    Args:
        accounts: Resolves emails to accounts
        codes: One-time code storage
        ledger: Attempt ledger used for rate limiting
        mailer: Anything with send_email(to_email, subject, html_body) -> bool
        code_generator: Returns a fresh 6-digit code
    """

    def __init__(
        self,
        accounts: AccountStore,
        codes: CodeStore,
        ledger: AttemptLedger,
        mailer,
        code_generator: Callable[[], str] = generate_two_factor_code
    ):
        self.accounts = accounts
        self.codes = codes
        self.ledger = ledger
        self.mailer = mailer
        self.code_generator = code_generator

    def request_code(self, email: str) -> TwoFactorResult:
        """
        Issue a new code for the account behind `email` and mail it.

        An email with no account gets the same SENT outcome, but no code is
        stored, no mail is sent and nothing is written to the ledger.
        """
        if self._is_rate_limited(email, REQUEST_WINDOW, MAX_REQUEST_ATTEMPTS):
            logger.warning(f"Code request rate limited for {email}")
            return TwoFactorResult(TwoFactorOutcome.RATE_LIMITED)

        user = self.accounts.find_by_email(email)
        if not user:
            logger.info(f"Code requested for unknown email {email}")
            return TwoFactorResult(TwoFactorOutcome.SENT)

        code = self.code_generator()

        # Single active code per user: drop unused ones, then insert
        self.codes.invalidate_active(user.id)
        self.codes.issue(user.id, code, CODE_TTL)
        self.ledger.record_attempt(email, AttemptType.CODE_REQUEST)

        expires_in_minutes = int(CODE_TTL.total_seconds() // 60)
        sent = self.mailer.send_email(
            email,
            TWO_FACTOR_SUBJECT,
            build_two_factor_html(code, expires_in_minutes)
        )
        if not sent:
            logger.error(f"Failed to dispatch two-factor code to {email}")
            return TwoFactorResult(TwoFactorOutcome.DISPATCH_FAILED, user_id=user.id)

        logger.info(f"Two-factor code sent to {email}")
        return TwoFactorResult(TwoFactorOutcome.SENT, user_id=user.id)

    def verify_code(self, email: str, candidate: str) -> TwoFactorResult:
        """
        Check a submitted code against the user's active code.

        On a match the code is consumed with a conditional update, so only
        one of several concurrent verifications of the same code succeeds.
        """
        if self._is_rate_limited(email, VERIFY_WINDOW, MAX_VERIFY_ATTEMPTS, AttemptType.VERIFY_FAILED):
            logger.warning(f"Code verification rate limited for {email}")
            return TwoFactorResult(TwoFactorOutcome.RATE_LIMITED)

        user = self.accounts.find_by_email(email)
        if not user:
            return self._reject(email, "unknown account")

        active_code = self.codes.find_active(user.id)
        if not active_code:
            return self._reject(email, "no active code")

        if not codes_match(active_code.code, candidate):
            return self._reject(email, "code mismatch")

        if not self.codes.mark_used(active_code.id):
            return self._reject(email, "code already consumed")

        logger.info(f"Two-factor verification successful for {email}")
        self.cleanup()
        return TwoFactorResult(TwoFactorOutcome.VERIFIED, user_id=user.id)

    def cleanup(self) -> None:
        """Purge stale codes and ledger entries. Failures are logged, never raised."""
        try:
            self.codes.purge_expired(CODE_GRACE_PERIOD)
        except SQLAlchemyError as e:
            self.codes.db.rollback()
            logger.warning(f"Expired code cleanup failed: {e}")

        try:
            self.ledger.purge_older_than(ATTEMPT_RETENTION)
        except SQLAlchemyError as e:
            self.ledger.db.rollback()
            logger.warning(f"Attempt ledger cleanup failed: {e}")

    def _is_rate_limited(
        self,
        email: str,
        window: timedelta,
        limit: int,
        attempt_type: Optional[AttemptType] = None
    ) -> bool:
        # Fail open: a ledger read error must not lock users out
        try:
            return self.ledger.count_recent(email, window, attempt_type) >= limit
        except SQLAlchemyError as e:
            self.ledger.db.rollback()
            logger.error(f"Error checking rate limit for {email}: {e}")
            return False

    def _reject(self, email: str, reason: str) -> TwoFactorResult:
        logger.info(f"Two-factor verification rejected for {email}: {reason}")
        self.ledger.record_attempt(email, AttemptType.VERIFY_FAILED)
        return TwoFactorResult(TwoFactorOutcome.INVALID)
