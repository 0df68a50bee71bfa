"""
Tests for the periodic cleanup task and health endpoints.
"""

import uuid
from datetime import datetime, timedelta, timezone

from delivery_hub.core.celery_app import celery_app
from delivery_hub.models.failed_login_attempt import AttemptType, FailedLoginAttempt
from delivery_hub.models.two_factor_code import TwoFactorCode
from delivery_hub.tasks import maintenance_tasks


class TestCleanupTask:
    """Test the hourly two-factor cleanup"""

    def test_cleanup_deletes_stale_records(self, db_session, driver, monkeypatch):
        now = datetime.now(timezone.utc)
        db_session.add_all([
            TwoFactorCode(id=uuid.uuid4(), user_id=driver.id, code="111111",
                          expires_at=now - timedelta(hours=2), used=False, created_at=now - timedelta(hours=2)),
            TwoFactorCode(id=uuid.uuid4(), user_id=driver.id, code="222222",
                          expires_at=now + timedelta(minutes=5), used=False, created_at=now),
            FailedLoginAttempt(identifier="old@example.com", attempt_type=AttemptType.VERIFY_FAILED,
                               attempt_time=now - timedelta(hours=30), created_at=now - timedelta(hours=30)),
            FailedLoginAttempt(identifier="new@example.com", attempt_type=AttemptType.CODE_REQUEST,
                               attempt_time=now, created_at=now),
        ])
        db_session.commit()

        # The task closes its session; keep the shared test session open
        monkeypatch.setattr(db_session, "close", lambda: None)
        monkeypatch.setattr(maintenance_tasks, "SessionLocal", lambda: db_session)

        result = maintenance_tasks.cleanup_two_factor_records_task()

        assert result == {"status": "success", "codes_deleted": 1, "attempts_deleted": 1}
        assert [row.code for row in db_session.query(TwoFactorCode).all()] == ["222222"]
        assert [row.identifier for row in db_session.query(FailedLoginAttempt).all()] == ["new@example.com"]

    def test_cleanup_is_scheduled_hourly(self):
        entry = celery_app.conf.beat_schedule["cleanup-two-factor-records"]

        assert entry["task"] == "cleanup_two_factor_records"
        assert entry["schedule"].minute == {0}


class TestHealth:
    """Test health endpoints"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client):
        response = client.get("/health/detailed")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"
