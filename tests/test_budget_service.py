"""Monthly category limits and spend measured against the ledger."""

import pytest

from database.budget_dao import BudgetDAO
from services.budget_service import BudgetService
from services.transaction_service import TransactionService

from conftest import USER


@pytest.fixture
def budget_dao(db) -> BudgetDAO:
    return BudgetDAO(db)


@pytest.fixture
def service(budget_dao, tx_dao) -> BudgetService:
    return BudgetService(budget_dao, tx_dao)


@pytest.fixture
def transactions(tx_dao, wallet_dao) -> TransactionService:
    return TransactionService(tx_dao, wallet_dao)


class TestLimits:
    def test_upsert_creates_then_updates(self, service):
        first = service.upsert(USER, "Makan & Minum", "2024-03", 1_500_000)
        second = service.upsert(USER, "Makan & Minum", "2024-03", 2_000_000)

        assert second.id == first.id
        assert [b.limit_amount for b in service.get_budget_status(USER, "2024-03")] == [2_000_000]

    @pytest.mark.parametrize(
        "category, month, limit, message",
        [
            ("  ", "2024-03", 1000, "category"),
            ("Belanja", "03-2024", 1000, "Invalid month"),
            ("Belanja", "2024-03", -1, "non-negative"),
            ("Belanja", "2024-03", 10.5, "non-negative"),
        ],
    )
    def test_rejects_bad_input(self, service, category, month, limit, message):
        with pytest.raises(ValueError, match=message):
            service.upsert(USER, category, month, limit)

    def test_limits_are_per_user(self, service):
        service.upsert(USER, "Belanja", "2024-03", 500000)
        service.upsert("someone-else", "Belanja", "2024-03", 100)

        assert [b.limit_amount for b in service.get_budget_status(USER, "2024-03")] == [500000]

    def test_delete(self, service):
        budget = service.upsert(USER, "Belanja", "2024-03", 500000)
        service.delete(budget.id)
        assert service.get_budget_status(USER, "2024-03") == []

    def test_admin_fee_category_is_budgetable(self, service):
        assert "Others" in service.get_budget_categories()


class TestSpending:
    def test_spent_sums_month_outcome_across_wallets(self, service, transactions, wallets):
        bca, gopay = wallets
        service.upsert(USER, "Makan & Minum", "2024-03", 100000)
        transactions.create_entry(USER, bca.id, "outcome", 40000, "2024-03-02", "Makan & Minum")
        transactions.create_entry(USER, gopay.id, "outcome", 25000, "2024-03-20", "Makan & Minum")
        transactions.create_entry(USER, bca.id, "outcome", 99000, "2024-02-28", "Makan & Minum")
        transactions.create_entry(USER, bca.id, "income", 50000, "2024-03-05", "Makan & Minum")

        [budget] = service.get_budget_status(USER, "2024-03")

        assert budget.spent_amount == 65000
        assert budget.remaining == 35000
        assert budget.percentage == pytest.approx(0.65)
        assert not budget.is_over

    def test_transfers_do_not_count_but_admin_fee_does(self, service, transactions, wallets):
        bca, gopay = wallets
        service.upsert(USER, "Others", "2024-03", 2000)
        transactions.create_transfer(USER, bca.id, gopay.id, 100000, "2024-03-05", admin_fee=2500)

        [budget] = service.get_budget_status(USER, "2024-03")

        assert budget.spent_amount == 2500
        assert budget.is_over
        assert budget.remaining == 0

    def test_budget_without_spending(self, service):
        service.upsert(USER, "Hiburan", "2024-03", 0)

        [budget] = service.get_budget_status(USER, "2024-03")

        assert budget.spent_amount == 0
        assert budget.percentage == 0.0


class TestCopyMonth:
    def test_copies_previous_month_limits(self, service):
        service.upsert(USER, "Belanja", "2023-12", 500000)
        service.upsert(USER, "Tagihan", "2023-12", 750000)
        service.upsert(USER, "Tagihan", "2024-01", 1)

        copied = service.copy_from_previous_month(USER, "2024-01")

        assert copied == 2
        limits = {b.category: b.limit_amount for b in service.get_budget_status(USER, "2024-01")}
        assert limits == {"Belanja": 500000, "Tagihan": 750000}

    def test_nothing_to_copy(self, service):
        assert service.copy_from_previous_month(USER, "2024-03") == 0

    def test_invalid_month(self, service):
        with pytest.raises(ValueError, match="Invalid month"):
            service.copy_from_previous_month(USER, "March")
