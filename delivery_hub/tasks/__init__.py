"""
Celery tasks package.

- maintenance_tasks: periodic purge of expired two-factor codes and old ledger entries
"""

from delivery_hub.tasks import maintenance_tasks

__all__ = ["maintenance_tasks"]
