"""Manual entries and wallet-to-wallet transfers."""

import sqlite3
from datetime import date

import pytest

from services.recurring_processor import RecurringProcessor
from services.transaction_service import TransactionService

from conftest import USER


@pytest.fixture
def service(tx_dao, wallet_dao) -> TransactionService:
    return TransactionService(tx_dao, wallet_dao)


class TestEntries:
    def test_outcome_entry(self, service, wallets):
        bca, _ = wallets
        tx = service.create_entry(USER, bca.id, "outcome", 35000, "2024-03-02", "Makan & Minum", " Nasi padang ")

        assert (tx.income, tx.outcome, tx.saving) == (0, 35000, 0)
        assert tx.description == "Nasi padang"
        assert tx.net == -35000
        assert not tx.is_transfer

    @pytest.mark.parametrize(
        "kind, amount, date_str, message",
        [
            ("transfer", 1000, "2024-03-02", "Invalid type"),
            ("outcome", 0, "2024-03-02", "positive"),
            ("outcome", 1000, "02/03/2024", "Invalid date"),
        ],
    )
    def test_rejects_bad_input(self, service, wallets, kind, amount, date_str, message):
        with pytest.raises(ValueError, match=message):
            service.create_entry(USER, wallets[0].id, kind, amount, date_str, "Lainnya")

    def test_filters_by_month(self, service, wallets):
        bca, _ = wallets
        service.create_entry(USER, bca.id, "income", 100, "2024-02-28", "Bonus")
        march = service.create_entry(USER, bca.id, "income", 200, "2024-03-01", "Bonus")

        assert [t.id for t in service.get_for_wallet(bca.id, "2024-03")] == [march.id]
        assert len(service.get_for_user(USER)) == 2

    def test_monthly_totals_exclude_transfers(self, service, wallets):
        bca, gopay = wallets
        service.create_entry(USER, bca.id, "income", 500000, "2024-03-01", "Gaji")
        service.create_entry(USER, bca.id, "saving", 100000, "2024-03-02", "Dana Darurat")
        service.create_transfer(USER, bca.id, gopay.id, 50000, "2024-03-03")

        totals = service.get_totals(bca.id, "2024-03")

        assert totals == {"income": 500000, "outcome": 0, "saving": 100000, "net": 400000}


class TestTransfers:
    def test_writes_linked_pair(self, service, wallets):
        bca, gopay = wallets

        withdrawal, deposit = service.create_transfer(
            USER, bca.id, gopay.id, 150000, "2024-03-05", note="topup",
        )

        assert withdrawal.wallet_id == bca.id
        assert withdrawal.outcome == 150000
        assert withdrawal.category == "Transfer Keluar"
        assert withdrawal.description == "Transfer ke GoPay - topup"
        assert deposit.wallet_id == gopay.id
        assert deposit.income == 150000
        assert deposit.category == "Transfer Masuk"
        assert deposit.description == "Transfer dari BCA - topup"
        for tx in (withdrawal, deposit):
            assert tx.is_transfer
            assert (tx.transfer_from_wallet_id, tx.transfer_to_wallet_id) == (bca.id, gopay.id)
            assert tx.recurring_template_id is None

    def test_admin_fee_is_separate_spending(self, service, wallet_dao, wallets):
        bca, gopay = wallets

        rows = service.create_transfer(USER, bca.id, gopay.id, 100000, "2024-03-05", admin_fee=2500)

        assert len(rows) == 3
        withdrawal, _, fee = rows
        assert withdrawal.description == "Transfer ke GoPay (Ad: Rp 2.500)"
        assert fee.outcome == 2500
        assert fee.category == "Others"
        assert fee.description == "Biaya Admin Transfer: BCA ke GoPay"
        assert fee.is_transfer is False
        assert wallet_dao.get_by_id(bca.id).current_balance == 897500

    def test_same_wallet_rejected(self, service, wallets):
        with pytest.raises(ValueError, match="must differ"):
            service.create_transfer(USER, wallets[0].id, wallets[0].id, 1000, "2024-03-05")

    def test_negative_fee_rejected(self, service, wallets):
        bca, gopay = wallets
        with pytest.raises(ValueError, match="Admin fee"):
            service.create_transfer(USER, bca.id, gopay.id, 1000, "2024-03-05", admin_fee=-1)

    def test_failed_leg_writes_nothing(self, service, tx_dao, wallets):
        bca, _ = wallets
        with pytest.raises(sqlite3.IntegrityError):
            service.create_transfer(USER, bca.id, 999, 1000, "2024-03-05")
        assert tx_dao.get_by_user(USER) == []

    def test_rows_by_template(self, service, recurring_dao, sqlite_store, wallets):
        bca, gopay = wallets
        template = recurring_dao.create(
            user_id=USER, description="Isi GoPay", amount=20000, kind="transfer",
            category="", wallet_id=bca.id, frequency="monthly", day_of_month=1,
            target_wallet_id=gopay.id,
        )
        service.create_entry(USER, bca.id, "outcome", 1000, "2024-03-01", "Lainnya")
        RecurringProcessor(sqlite_store).generate_now(template.id, date(2024, 3, 1))

        rows = service.get_for_template(template.id)

        assert [r.wallet_id for r in rows] == [bca.id, gopay.id]


class TestDelete:
    def test_entry(self, service, tx_dao, wallets):
        tx = service.create_entry(USER, wallets[0].id, "outcome", 1000, "2024-03-01", "Lainnya")

        assert service.delete(tx.id) == 1
        assert tx_dao.get_by_user(USER) == []

    def test_missing_row(self, service):
        assert service.delete(999) == 0

    @pytest.mark.parametrize("leg", [0, 1])
    def test_transfer_leg_removes_both_sides(self, service, wallet_dao, wallets, leg):
        bca, gopay = wallets
        rows = service.create_transfer(USER, bca.id, gopay.id, 50000, "2024-03-05", admin_fee=2500)

        assert service.delete(rows[leg].id) == 2

        assert [t.id for t in service.get_for_user(USER)] == [rows[2].id]
        assert wallet_dao.get_by_id(bca.id).current_balance == 997500
        assert wallet_dao.get_by_id(gopay.id).current_balance == 0

    def test_identical_transfers_lose_one_pair(self, service, wallets):
        bca, gopay = wallets
        first = service.create_transfer(USER, bca.id, gopay.id, 50000, "2024-03-05")
        second = service.create_transfer(USER, bca.id, gopay.id, 50000, "2024-03-05")

        service.delete(second[1].id)

        remaining = service.get_for_user(USER)
        assert len(remaining) == 2
        assert sum(t.net for t in remaining) == 0
        assert {t.id for t in remaining} == {first[0].id, first[1].id}


class TestSpendingByCategory:
    def test_outcome_per_category_without_transfers(self, service, tx_dao, wallets):
        bca, gopay = wallets
        service.create_entry(USER, bca.id, "outcome", 30000, "2024-03-01", "Belanja")
        service.create_entry(USER, gopay.id, "outcome", 20000, "2024-03-09", "Belanja")
        service.create_entry(USER, bca.id, "saving", 100000, "2024-03-09", "Dana Darurat")
        service.create_transfer(USER, bca.id, gopay.id, 10000, "2024-03-10")

        assert tx_dao.get_spending_by_category(USER, "2024-03") == {"Belanja": 50000}
        assert tx_dao.get_spending_by_category(USER, "2024-04") == {}
