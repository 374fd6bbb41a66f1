"""Savings goals and their progress."""

import logging

import pytest

from database.goal_dao import GoalDAO
from services.goal_service import GoalService
from services.transaction_service import TransactionService

from conftest import USER


@pytest.fixture
def service(db, wallet_dao) -> GoalService:
    return GoalService(GoalDAO(db), wallet_dao)


@pytest.fixture
def transactions(tx_dao, wallet_dao) -> TransactionService:
    return TransactionService(tx_dao, wallet_dao)


class TestGoals:
    def test_create_with_defaults(self, service):
        goal = service.create(USER, "  Laptop  ", 15_000_000)

        assert goal.name == "Laptop"
        assert goal.current_amount == 0
        assert goal.wallet_id is None
        assert goal.deadline is None
        assert goal.color == "#3b82f6"
        assert [p.goal.id for p in service.get_progress(USER)] == [goal.id]

    @pytest.mark.parametrize(
        "name, target, current, deadline, message",
        [
            ("", 1000, 0, None, "name"),
            ("Laptop", 0, 0, None, "Target"),
            ("Laptop", True, 0, None, "Target"),
            ("Laptop", 1000, -5, None, "Current"),
            ("Laptop", 1000, 0, "31/12/2024", "Invalid deadline"),
        ],
    )
    def test_rejects_bad_input(self, service, name, target, current, deadline, message):
        with pytest.raises(ValueError, match=message):
            service.create(USER, name, target, current, deadline=deadline)

    def test_wallet_must_belong_to_user(self, service, wallet_dao):
        foreign = wallet_dao.create("someone-else", "Jago")
        with pytest.raises(ValueError, match="Linked wallet"):
            service.create(USER, "Rumah", 1000, wallet_id=foreign.id)

    def test_update_and_clear_deadline(self, service, wallets):
        goal = service.create(USER, "Liburan", 5_000_000, deadline="2024-12-31")

        updated = service.update(
            goal.id, "Liburan Bali", 6_000_000, 1_000_000,
            wallet_id=wallets[1].id, deadline="  ", color="#10b981",
        )

        assert (updated.name, updated.target_amount, updated.current_amount) == ("Liburan Bali", 6_000_000, 1_000_000)
        assert updated.wallet_id == wallets[1].id
        assert updated.deadline is None
        assert updated.color == "#10b981"

    def test_update_missing_goal(self, service):
        with pytest.raises(ValueError, match="not found"):
            service.update(99, "X", 1000)

    def test_delete(self, service):
        goal = service.create(USER, "Laptop", 1000)
        service.delete(goal.id)
        assert service.get_progress(USER) == []


class TestProgress:
    def test_manual_amount(self, service):
        service.create(USER, "Laptop", 10_000_000, 2_500_000)

        [progress] = service.get_progress(USER)

        assert progress.current_amount == 2_500_000
        assert progress.percentage == pytest.approx(0.25)
        assert progress.remaining == 7_500_000
        assert progress.wallet_name is None
        assert not progress.is_reached

    def test_linked_wallet_balance_replaces_manual_amount(self, service, transactions, wallets):
        bca, gopay = wallets
        service.create(USER, "Dana Darurat", 200000, 999, wallet_id=gopay.id)
        transactions.create_transfer(USER, bca.id, gopay.id, 150000, "2024-03-05")

        [progress] = service.get_progress(USER)

        assert progress.current_amount == 150000
        assert progress.wallet_name == "GoPay"
        assert progress.percentage == pytest.approx(0.75)

    def test_percentage_capped_when_target_passed(self, service, wallets):
        service.create(USER, "Motor", 500000, wallet_id=wallets[0].id)

        [progress] = service.get_progress(USER)

        assert progress.current_amount == 1_000_000
        assert progress.percentage == 1.0
        assert progress.remaining == 0
        assert progress.is_reached

    def test_deactivated_wallet_falls_back_to_manual_amount(self, service, wallet_dao, wallets, caplog):
        bca, _ = wallets
        service.create(USER, "Rumah", 1_000_000, 300000, wallet_id=bca.id)
        wallet_dao.set_active(bca.id, False)

        with caplog.at_level(logging.WARNING):
            [progress] = service.get_progress(USER)

        assert progress.current_amount == 300000
        assert "unavailable wallet" in caplog.text
