import os
import sqlite3
import threading
from contextlib import contextmanager
from utils.constants import DB_FILE, DEFAULT_WALLET_NAME


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._unit_depth = 0
        self._lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            # Transactions are managed explicitly through unit_of_work()
            self._conn = sqlite3.connect(
                self.db_path, check_same_thread=False, isolation_level=None
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    @property
    def in_unit_of_work(self) -> bool:
        return self._unit_depth > 0

    @contextmanager
    def unit_of_work(self):
        """Run the enclosed statements in one SQLite transaction.

        Nested units join the outermost one; only the outermost commits or
        rolls back. The connection is shared across threads, so the lock is
        held for the whole outermost unit and other threads wait for it.
        """
        conn = self.get_connection()
        with self._lock:
            if self._unit_depth:
                self._unit_depth += 1
                try:
                    yield conn
                finally:
                    self._unit_depth -= 1
                return

            conn.execute("BEGIN IMMEDIATE")
            self._unit_depth = 1
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            else:
                try:
                    conn.execute("COMMIT")
                except sqlite3.Error:
                    # A failed COMMIT can leave the transaction open
                    if conn.in_transaction:
                        conn.execute("ROLLBACK")
                    raise
            finally:
                self._unit_depth = 0

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        with self.unit_of_work():
            self._create_schema(conn)
            self._seed_settings(conn)

    def _create_schema(self, conn: sqlite3.Connection):
        for statement in _SCHEMA:
            conn.execute(statement)

    def _seed_settings(self, conn: sqlite3.Connection):
        defaults = [
            ("appearance_mode", "system"),
            ("currency_symbol", "Rp"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def seed_default_wallet(self, user_id: str):
        """Give a brand-new user one wallet so the UI has something to select."""
        conn = self.get_connection()
        row = conn.execute(
            "SELECT COUNT(*) AS cnt FROM wallets WHERE user_id = ?", (user_id,)
        ).fetchone()
        if row["cnt"] == 0:
            conn.execute(
                "INSERT INTO wallets(user_id, name, type) VALUES (?, ?, 'cash')",
                (user_id, DEFAULT_WALLET_NAME),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: open (creating if needed) the DB in db_folder or CWD."""
        path = os.path.join(db_folder, DB_FILE) if db_folder else DB_FILE
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None


_SCHEMA = [
    """CREATE TABLE IF NOT EXISTS wallets (
        id              INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id         TEXT    NOT NULL,
        name            TEXT    NOT NULL,
        type            TEXT    NOT NULL DEFAULT 'cash',
        initial_balance INTEGER NOT NULL DEFAULT 0,
        is_active       INTEGER NOT NULL DEFAULT 1,
        created_at      TEXT    NOT NULL DEFAULT (datetime('now'))
    )""",
    """CREATE TABLE IF NOT EXISTS recurring_templates (
        id               INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id          TEXT    NOT NULL,
        description      TEXT    NOT NULL,
        amount           INTEGER NOT NULL CHECK(amount > 0),
        kind             TEXT    NOT NULL CHECK(kind IN ('income','outcome','saving','transfer')),
        category         TEXT    NOT NULL DEFAULT '',
        wallet_id        INTEGER NOT NULL REFERENCES wallets(id),
        target_wallet_id INTEGER REFERENCES wallets(id),
        frequency        TEXT    NOT NULL DEFAULT 'monthly',
        day_of_month     INTEGER NOT NULL DEFAULT 1,
        is_active        INTEGER NOT NULL DEFAULT 1,
        last_generated   TEXT,
        created_at       TEXT    NOT NULL DEFAULT (datetime('now'))
    )""",
    """CREATE TABLE IF NOT EXISTS transactions (
        id                      INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id                 TEXT    NOT NULL,
        wallet_id               INTEGER NOT NULL REFERENCES wallets(id),
        description             TEXT    NOT NULL DEFAULT '',
        category                TEXT    NOT NULL DEFAULT '',
        date                    TEXT    NOT NULL,
        income                  INTEGER NOT NULL DEFAULT 0 CHECK(income >= 0),
        outcome                 INTEGER NOT NULL DEFAULT 0 CHECK(outcome >= 0),
        saving                  INTEGER NOT NULL DEFAULT 0 CHECK(saving >= 0),
        is_transfer             INTEGER NOT NULL DEFAULT 0,
        transfer_from_wallet_id INTEGER,
        transfer_to_wallet_id   INTEGER,
        recurring_template_id   INTEGER REFERENCES recurring_templates(id) ON DELETE SET NULL,
        created_at              TEXT    NOT NULL DEFAULT (datetime('now'))
    )""",
    """CREATE TABLE IF NOT EXISTS budgets (
        id           INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id      TEXT    NOT NULL,
        category     TEXT    NOT NULL,
        month        TEXT    NOT NULL,
        limit_amount INTEGER NOT NULL CHECK(limit_amount >= 0),
        UNIQUE(user_id, category, month)
    )""",
    """CREATE TABLE IF NOT EXISTS financial_goals (
        id             INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id        TEXT    NOT NULL,
        name           TEXT    NOT NULL,
        target_amount  INTEGER NOT NULL CHECK(target_amount > 0),
        current_amount INTEGER NOT NULL DEFAULT 0 CHECK(current_amount >= 0),
        wallet_id      INTEGER REFERENCES wallets(id) ON DELETE SET NULL,
        deadline       TEXT,
        color          TEXT    NOT NULL DEFAULT '#3b82f6',
        created_at     TEXT    NOT NULL DEFAULT (datetime('now'))
    )""",
    "CREATE INDEX IF NOT EXISTS idx_wallets_user ON wallets(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_templates_user_active ON recurring_templates(user_id, is_active)",
    "CREATE INDEX IF NOT EXISTS idx_transactions_wallet ON transactions(wallet_id)",
    "CREATE INDEX IF NOT EXISTS idx_transactions_user_date ON transactions(user_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_budgets_user_month ON budgets(user_id, month)",
    "CREATE INDEX IF NOT EXISTS idx_goals_user ON financial_goals(user_id)",
    """CREATE TABLE IF NOT EXISTS app_settings (
        key   TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )""",
]
