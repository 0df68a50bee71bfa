"""
Unit tests for the code store, the attempt ledger and the account store.
"""

import uuid
from datetime import timedelta

from delivery_hub.crud.account import AccountStore
from delivery_hub.crud.attempt_ledger import AttemptLedger
from delivery_hub.crud.code_store import CodeStore
from delivery_hub.models.failed_login_attempt import AttemptType, FailedLoginAttempt
from delivery_hub.models.two_factor_code import TwoFactorCode
from delivery_hub.models.user import UserRole


class TestCodeStore:
    """Test one-time code storage"""

    def test_issue_sets_expiry_from_clock(self, db_session, driver, clock):
        store = CodeStore(db_session, clock=clock)
        code = store.issue(driver.id, "482913", timedelta(minutes=10))

        assert code.code == "482913"
        assert code.used is False
        assert store.find_active(driver.id).id == code.id

        clock.advance(minutes=10)
        assert store.find_active(driver.id) is None

    def test_find_active_returns_newest(self, db_session, driver, clock):
        store = CodeStore(db_session, clock=clock)
        store.issue(driver.id, "111111", timedelta(minutes=10))
        clock.advance(seconds=5)
        store.issue(driver.id, "222222", timedelta(minutes=10))

        assert store.find_active(driver.id).code == "222222"

    def test_find_active_skips_used_codes(self, db_session, driver, clock):
        store = CodeStore(db_session, clock=clock)
        code = store.issue(driver.id, "482913", timedelta(minutes=10))
        store.mark_used(code.id)

        assert store.find_active(driver.id) is None

    def test_invalidate_active_keeps_used_codes(self, db_session, driver, clock):
        store = CodeStore(db_session, clock=clock)
        used = store.issue(driver.id, "111111", timedelta(minutes=10))
        store.mark_used(used.id)
        store.issue(driver.id, "222222", timedelta(minutes=10))

        assert store.invalidate_active(driver.id) == 1
        assert [row.code for row in db_session.query(TwoFactorCode).all()] == ["111111"]

    def test_invalidate_active_only_touches_one_user(self, db_session, driver, admin, clock):
        store = CodeStore(db_session, clock=clock)
        store.issue(driver.id, "111111", timedelta(minutes=10))
        store.issue(admin.id, "222222", timedelta(minutes=10))

        store.invalidate_active(driver.id)

        assert store.find_active(driver.id) is None
        assert store.find_active(admin.id).code == "222222"

    def test_mark_used_applies_once(self, db_session, driver, clock):
        """Second call is a no-op and reports that it did not apply"""
        store = CodeStore(db_session, clock=clock)
        code = store.issue(driver.id, "482913", timedelta(minutes=10))

        assert store.mark_used(code.id) is True
        assert store.mark_used(code.id) is False

        db_session.refresh(code)
        assert code.used is True

    def test_mark_used_unknown_id(self, db_session, clock):
        assert CodeStore(db_session, clock=clock).mark_used(uuid.uuid4()) is False

    def test_purge_expired_respects_grace(self, db_session, driver, clock):
        store = CodeStore(db_session, clock=clock)
        store.issue(driver.id, "482913", timedelta(minutes=10))

        clock.advance(minutes=10 + 59)
        assert store.purge_expired(timedelta(hours=1)) == 0

        clock.advance(minutes=2)
        assert store.purge_expired(timedelta(hours=1)) == 1
        assert db_session.query(TwoFactorCode).count() == 0

    def test_deleting_user_removes_codes(self, db_session, driver, clock):
        CodeStore(db_session, clock=clock).issue(driver.id, "482913", timedelta(minutes=10))

        db_session.delete(driver)
        db_session.commit()

        assert db_session.query(TwoFactorCode).count() == 0


class TestAttemptLedger:
    """Test the attempt ledger"""

    def test_count_recent_window_is_inclusive(self, db_session, clock):
        ledger = AttemptLedger(db_session, clock=clock)
        ledger.record_attempt("a@example.com")

        clock.advance(minutes=5)
        assert ledger.count_recent("a@example.com", timedelta(minutes=5)) == 1

        clock.advance(seconds=1)
        assert ledger.count_recent("a@example.com", timedelta(minutes=5)) == 0

    def test_count_recent_by_type(self, db_session, clock):
        ledger = AttemptLedger(db_session, clock=clock)
        ledger.record_attempt("a@example.com", AttemptType.CODE_REQUEST)
        ledger.record_attempt("a@example.com", AttemptType.VERIFY_FAILED)
        ledger.record_attempt("a@example.com", AttemptType.VERIFY_FAILED)

        window = timedelta(minutes=15)
        assert ledger.count_recent("a@example.com", window) == 3
        assert ledger.count_recent("a@example.com", window, AttemptType.VERIFY_FAILED) == 2
        assert ledger.count_recent("a@example.com", window, AttemptType.CODE_REQUEST) == 1

    def test_identifiers_are_counted_separately(self, db_session, clock):
        ledger = AttemptLedger(db_session, clock=clock)
        ledger.record_attempt("a@example.com")
        ledger.record_attempt("b@example.com")

        assert ledger.count_recent("a@example.com", timedelta(minutes=5)) == 1
        assert ledger.count_recent("c@example.com", timedelta(minutes=5)) == 0

    def test_record_attempt_defaults_to_verify_failed(self, db_session, clock):
        AttemptLedger(db_session, clock=clock).record_attempt("a@example.com")

        attempt = db_session.query(FailedLoginAttempt).one()
        assert attempt.attempt_type == AttemptType.VERIFY_FAILED

    def test_purge_older_than(self, db_session, clock):
        ledger = AttemptLedger(db_session, clock=clock)
        ledger.record_attempt("old@example.com")
        clock.advance(hours=23)
        ledger.record_attempt("new@example.com")
        clock.advance(hours=1, seconds=1)

        assert ledger.purge_older_than(timedelta(hours=24)) == 1
        assert ledger.purge_older_than(timedelta(hours=24)) == 0

        remaining = [row.identifier for row in db_session.query(FailedLoginAttempt).all()]
        assert remaining == ["new@example.com"]


class TestAccountStore:
    """Test account lookups used by the auth endpoints"""

    def test_record_login_stamps_time(self, db_session, driver):
        accounts = AccountStore(db_session)
        assert driver.last_login_at is None

        user = accounts.record_login(accounts.get(driver.id))

        assert user.last_login_at is not None

    def test_list_users_by_role(self, db_session, driver, admin):
        accounts = AccountStore(db_session)

        assert [user.email for user in accounts.list_users()] == ["admin@example.com", "driver@example.com"]
        assert [user.email for user in accounts.list_users(role=UserRole.ADMIN)] == ["admin@example.com"]
