"""Tests for DatabaseManager: schema, settings and units of work."""

import sqlite3
import threading

import pytest

from database.db_manager import DatabaseManager
from models.transaction import TransactionDraft
from utils.constants import DB_FILE, DEFAULT_WALLET_NAME

from conftest import USER


class TestInitialize:
    def test_creates_tables(self, db):
        rows = db.get_connection().execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        ).fetchall()
        names = {r["name"] for r in rows}
        assert {
            "wallets", "recurring_templates", "transactions",
            "budgets", "financial_goals", "app_settings",
        } <= names

    def test_is_idempotent(self, db):
        db.set_setting("currency_symbol", "IDR")
        db.initialize()
        assert db.get_setting("currency_symbol") == "IDR"

    def test_open_creates_file_in_folder(self, tmp_path):
        folder = tmp_path / "data"
        database = DatabaseManager.open(str(folder))
        try:
            assert (folder / DB_FILE).exists()
            mode = database.get_connection().execute("PRAGMA journal_mode").fetchone()[0]
            assert mode == "wal"
        finally:
            database.close()

    def test_rejects_non_positive_template_amount(self, db, wallets):
        with pytest.raises(sqlite3.IntegrityError):
            db.get_connection().execute(
                """INSERT INTO recurring_templates
                   (user_id, description, amount, kind, wallet_id)
                   VALUES (?, 'x', 0, 'outcome', ?)""",
                (USER, wallets[0].id),
            )


class TestSettings:
    def test_seeded_defaults(self, db):
        assert db.get_setting("currency_symbol") == "Rp"
        assert db.get_setting("appearance_mode") == "system"

    def test_missing_key_uses_default(self, db):
        assert db.get_setting("nope", "fallback") == "fallback"

    def test_set_overwrites(self, db):
        db.set_setting("appearance_mode", "dark")
        assert db.get_setting("appearance_mode") == "dark"


class TestDefaultWallet:
    def test_seeds_once_for_new_user(self, db, wallet_dao):
        db.seed_default_wallet(USER)
        db.seed_default_wallet(USER)

        wallets = wallet_dao.get_active(USER)
        assert [w.name for w in wallets] == [DEFAULT_WALLET_NAME]

    def test_existing_user_is_untouched(self, db, wallet_dao, wallets):
        db.seed_default_wallet(USER)
        assert len(wallet_dao.get_active(USER)) == 2


class TestUnitOfWork:
    def test_rollback_discards_all_statements(self, db, wallet_dao):
        with pytest.raises(ValueError):
            with db.unit_of_work():
                wallet_dao.create(USER, "BCA")
                wallet_dao.create(USER, "GoPay")
                raise ValueError("abort")
        assert wallet_dao.get_active(USER) == []

    def test_inner_failure_rolls_back_outer(self, db, wallet_dao):
        with pytest.raises(ValueError):
            with db.unit_of_work():
                wallet_dao.create(USER, "BCA")
                with db.unit_of_work():
                    raise ValueError("abort")
        assert wallet_dao.get_active(USER) == []
        assert not db.in_unit_of_work

    def test_other_thread_does_not_join_open_unit(self, db, tx_dao, wallets):
        """A unit started on another thread must not nest into ours."""
        bca, _ = wallets
        holding = threading.Event()
        release = threading.Event()
        errors = []

        def hold_unit():
            with db.unit_of_work():
                holding.set()
                release.wait(timeout=5)

        def write_pair():
            try:
                tx_dao.create_many([
                    TransactionDraft(USER, bca.id, "leg1", "", "2024-03-01", outcome=100),
                    TransactionDraft(USER, 999, "leg2", "", "2024-03-01", income=100),
                ])
            except sqlite3.Error as e:
                errors.append(e)

        holder = threading.Thread(target=hold_unit)
        holder.start()
        assert holding.wait(timeout=5)
        writer = threading.Thread(target=write_pair)
        writer.start()
        writer.join(timeout=0.2)
        release.set()
        holder.join(timeout=5)
        writer.join(timeout=5)

        assert len(errors) == 1
        assert isinstance(errors[0], sqlite3.IntegrityError)
        assert tx_dao.get_by_user(USER) == []
        assert not db.in_unit_of_work

    def test_failed_commit_is_rolled_back(self, db, wallet_dao):
        with pytest.raises(sqlite3.IntegrityError):
            with db.unit_of_work() as conn:
                conn.execute("PRAGMA defer_foreign_keys = ON")
                conn.execute(
                    """INSERT INTO transactions (user_id, wallet_id, date, outcome)
                       VALUES (?, 999, '2024-03-01', 100)""",
                    (USER,),
                )

        conn = db.get_connection()
        assert not conn.in_transaction
        assert conn.execute("SELECT COUNT(*) FROM transactions").fetchone()[0] == 0
        with db.unit_of_work():
            wallet_dao.create(USER, "BCA")
        assert [w.name for w in wallet_dao.get_active(USER)] == ["BCA"]
