"""Persistence interface used by the recurring processor, and its SQLite implementation."""
import sqlite3
from contextlib import contextmanager
from typing import ContextManager, Iterable, Optional, Protocol

from database.db_manager import DatabaseManager
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from database.wallet_dao import WalletDAO
from models.recurring_template import RecurringTemplate
from models.transaction import Transaction, TransactionDraft


class StoreError(Exception):
    """A read or write against the ledger store failed."""


class ConcurrentUpdateError(StoreError):
    """A conditional update lost against a concurrent writer."""


class LedgerStore(Protocol):
    """What the recurring processor needs from persistence.

    Writes made inside ``atomic()`` are all kept or all discarded.
    """

    def list_active_templates(self, user_id: str) -> list[RecurringTemplate]: ...

    def get_template(self, template_id: int) -> Optional[RecurringTemplate]: ...

    def get_wallet_names(self, wallet_ids: Iterable[int]) -> dict[int, str]: ...

    def append_transaction(self, draft: TransactionDraft) -> Transaction: ...

    def mark_template_generated(
        self, template_id: int, at: str, expected: Optional[str]
    ) -> bool: ...

    def atomic(self) -> ContextManager: ...


class SqliteLedgerStore:
    """LedgerStore over the application's SQLite database.

    Every sqlite3.Error surfaces as StoreError.
    """

    def __init__(
        self,
        db: DatabaseManager,
        recurring_dao: RecurringDAO | None = None,
        wallet_dao: WalletDAO | None = None,
        tx_dao: TransactionDAO | None = None,
    ):
        self._db = db
        self._recurring_dao = recurring_dao or RecurringDAO(db)
        self._wallet_dao = wallet_dao or WalletDAO(db)
        self._tx_dao = tx_dao or TransactionDAO(db)

    def list_active_templates(self, user_id: str) -> list[RecurringTemplate]:
        try:
            return self._recurring_dao.get_active(user_id)
        except sqlite3.Error as e:
            raise StoreError(f"Could not load recurring templates: {e}") from e

    def get_template(self, template_id: int) -> Optional[RecurringTemplate]:
        try:
            return self._recurring_dao.get_by_id(template_id)
        except sqlite3.Error as e:
            raise StoreError(f"Could not load template {template_id}: {e}") from e

    def get_wallet_names(self, wallet_ids: Iterable[int]) -> dict[int, str]:
        ids = [w for w in dict.fromkeys(wallet_ids) if w is not None]
        try:
            return self._wallet_dao.get_names(ids)
        except sqlite3.Error as e:
            raise StoreError(f"Could not load wallet names: {e}") from e

    def append_transaction(self, draft: TransactionDraft) -> Transaction:
        try:
            return self._tx_dao.create(draft)
        except sqlite3.Error as e:
            raise StoreError(f"Could not save transaction: {e}") from e

    def mark_template_generated(
        self, template_id: int, at: str, expected: Optional[str]
    ) -> bool:
        try:
            return self._recurring_dao.update_last_generated(template_id, at, expected)
        except sqlite3.Error as e:
            raise StoreError(f"Could not update template {template_id}: {e}") from e

    @contextmanager
    def atomic(self):
        try:
            with self._db.unit_of_work():
                yield self
        except sqlite3.Error as e:
            raise StoreError(f"Ledger transaction failed: {e}") from e
