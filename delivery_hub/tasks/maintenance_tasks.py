"""
Periodic maintenance tasks.
"""

import logging
from celery import shared_task

from delivery_hub.core.database import SessionLocal
from delivery_hub.core.two_factor import ATTEMPT_RETENTION, CODE_GRACE_PERIOD
from delivery_hub.crud.attempt_ledger import AttemptLedger
from delivery_hub.crud.code_store import CodeStore

logger = logging.getLogger(__name__)


@shared_task(name="cleanup_two_factor_records")
def cleanup_two_factor_records_task():
    """
    Delete codes that expired over an hour ago and ledger entries older than 24 hours.

    Scheduled hourly by Celery beat (see delivery_hub.core.celery_app).
    """
    db = SessionLocal()
    try:
        codes_deleted = CodeStore(db).purge_expired(CODE_GRACE_PERIOD)
        attempts_deleted = AttemptLedger(db).purge_older_than(ATTEMPT_RETENTION)
        logger.info(f"Cleaned up {codes_deleted} expired codes and {attempts_deleted} old attempts")
        return {"status": "success", "codes_deleted": codes_deleted, "attempts_deleted": attempts_deleted}
    except Exception as e:
        db.rollback()
        logger.error(f"Error cleaning up two-factor records: {str(e)}")
        raise
    finally:
        db.close()
