"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from delivery_hub.crud import customer
from delivery_hub.crud.account import AccountStore
from delivery_hub.crud.attempt_ledger import AttemptLedger
from delivery_hub.crud.code_store import CodeStore

__all__ = ["customer", "AccountStore", "AttemptLedger", "CodeStore"]
