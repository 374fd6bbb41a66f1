"""Shared fixtures: a SQLite-backed ledger and an in-memory LedgerStore fake."""

from contextlib import contextmanager
from dataclasses import asdict, replace
from datetime import datetime
from typing import Iterable, Optional

import pytest

from database.db_manager import DatabaseManager
from database.ledger_store import SqliteLedgerStore, StoreError
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from database.wallet_dao import WalletDAO
from models.recurring_template import RecurringTemplate
from models.transaction import Transaction, TransactionDraft
from services.recurring_processor import RecurringProcessor

USER = "user-1"
WALLET_A = 1
WALLET_B = 2


class InMemoryLedgerStore:
    """LedgerStore fake with failure injection.

    Reads hand out copies so callers cannot mutate stored state behind the
    store's back, which keeps the compare-and-swap meaningful.
    """

    def __init__(self):
        self.templates: dict[int, RecurringTemplate] = {}
        self.wallet_names: dict[int, str] = {WALLET_A: "BCA", WALLET_B: "GoPay"}
        self.transactions: list[Transaction] = []
        self.fail_list = False
        self.fail_wallet_names = False
        self.fail_append_on: set[int] = set()   # 1-based append call numbers
        self.fail_mark = False
        self.append_calls = 0
        self.mark_calls = 0
        self._next_tx_id = 1
        self._depth = 0

    def add_template(self, **overrides) -> RecurringTemplate:
        template_id = overrides.pop("id", len(self.templates) + 1)
        fields = dict(
            id=template_id,
            user_id=USER,
            description=f"Template {template_id}",
            amount=50000,
            kind="outcome",
            category="Tagihan",
            wallet_id=WALLET_A,
            frequency="monthly",
            day_of_month=15,
            is_active=True,
            target_wallet_id=None,
            last_generated=None,
        )
        fields.update(overrides)
        template = RecurringTemplate(**fields)
        self.templates[template.id] = template
        return replace(template)

    def list_active_templates(self, user_id: str) -> list[RecurringTemplate]:
        if self.fail_list:
            raise StoreError("connection refused")
        return [
            replace(t) for t in self.templates.values()
            if t.user_id == user_id and t.is_active
        ]

    def get_template(self, template_id: int) -> Optional[RecurringTemplate]:
        template = self.templates.get(template_id)
        return replace(template) if template else None

    def get_wallet_names(self, wallet_ids: Iterable[int]) -> dict[int, str]:
        if self.fail_wallet_names:
            raise StoreError("wallet lookup timed out")
        return {w: self.wallet_names[w] for w in wallet_ids if w in self.wallet_names}

    def append_transaction(self, draft: TransactionDraft) -> Transaction:
        self.append_calls += 1
        if self.append_calls in self.fail_append_on:
            raise StoreError("insert failed")
        tx = Transaction(id=self._next_tx_id, **asdict(draft))
        self._next_tx_id += 1
        self.transactions.append(tx)
        return tx

    def mark_template_generated(self, template_id: int, at: str, expected: Optional[str]) -> bool:
        self.mark_calls += 1
        if self.fail_mark:
            raise StoreError("update failed")
        template = self.templates[template_id]
        if template.last_generated != expected:
            return False
        template.last_generated = at
        return True

    @contextmanager
    def atomic(self):
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        snapshot = (
            list(self.transactions),
            {k: replace(v) for k, v in self.templates.items()},
            self._next_tx_id,
        )
        self._depth = 1
        try:
            yield self
        except BaseException:
            self.transactions, self.templates, self._next_tx_id = snapshot
            raise
        finally:
            self._depth = 0


@pytest.fixture
def fake_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def processor(fake_store: InMemoryLedgerStore) -> RecurringProcessor:
    return RecurringProcessor(fake_store, clock=lambda: datetime(2024, 3, 15, 9, 30))


@pytest.fixture
def db() -> DatabaseManager:
    """Initialized in-memory SQLite database."""
    database = DatabaseManager(":memory:")
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def wallet_dao(db: DatabaseManager) -> WalletDAO:
    return WalletDAO(db)


@pytest.fixture
def recurring_dao(db: DatabaseManager) -> RecurringDAO:
    return RecurringDAO(db)


@pytest.fixture
def tx_dao(db: DatabaseManager) -> TransactionDAO:
    return TransactionDAO(db)


@pytest.fixture
def wallets(wallet_dao: WalletDAO):
    """Two wallets for USER: (bca, gopay)."""
    bca = wallet_dao.create(USER, "BCA", "bank", 1_000_000)
    gopay = wallet_dao.create(USER, "GoPay", "e-wallet", 0)
    return bca, gopay


@pytest.fixture
def sqlite_store(db, recurring_dao, wallet_dao, tx_dao) -> SqliteLedgerStore:
    return SqliteLedgerStore(db, recurring_dao, wallet_dao, tx_dao)
