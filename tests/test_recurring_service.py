"""Template management: validation and next-due previews."""

from datetime import date

import pytest

from models.recurring_template import RecurringTemplate
from services.recurring_processor import RecurringProcessor
from services.recurring_service import RecurringService

from conftest import USER


@pytest.fixture
def service(recurring_dao, wallet_dao) -> RecurringService:
    return RecurringService(recurring_dao, wallet_dao)


def _template(**overrides) -> RecurringTemplate:
    fields = dict(
        id=1, user_id=USER, description="Kos", amount=1_500_000, kind="outcome",
        category="Tagihan", wallet_id=1, frequency="monthly", day_of_month=15,
    )
    fields.update(overrides)
    return RecurringTemplate(**fields)


class TestCreate:
    def test_creates_outcome_template(self, service, wallets):
        bca, _ = wallets
        template = service.create(USER, "  Kos  ", 1_500_000, "outcome", "Tagihan", bca.id, day_of_month=1)

        assert template.id is not None
        assert template.description == "Kos"
        assert template.is_active
        assert template.last_generated is None
        assert service.get_all(USER) == [template]

    def test_creates_transfer_template(self, service, wallets):
        bca, gopay = wallets
        template = service.create(
            USER, "Isi GoPay", 100000, "transfer", "", bca.id,
            day_of_month=25, target_wallet_id=gopay.id,
        )
        assert template.is_transfer
        assert template.target_wallet_id == gopay.id

    def test_target_wallet_dropped_for_non_transfer(self, service, wallets):
        bca, gopay = wallets
        template = service.create(
            USER, "Gaji", 8_000_000, "income", "Gaji", bca.id, target_wallet_id=gopay.id,
        )
        assert template.target_wallet_id is None

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"description": "   "}, "Description cannot be empty"),
            ({"amount": 0}, "Amount must be a positive"),
            ({"amount": -5}, "Amount must be a positive"),
            ({"amount": 10.5}, "Amount must be a positive"),
            ({"kind": "refund"}, "Invalid type 'refund'"),
            ({"frequency": "yearly"}, "Invalid frequency"),
            ({"day_of_month": 0}, "Day of month must be between 1 and 31"),
            ({"day_of_month": 32}, "Day of month must be between 1 and 31"),
        ],
    )
    def test_rejects_invalid_fields(self, service, wallets, overrides, message):
        fields = dict(
            user_id=USER, description="Kos", amount=1000, kind="outcome",
            category="Tagihan", wallet_id=wallets[0].id,
        )
        fields.update(overrides)
        with pytest.raises(ValueError, match=message):
            service.create(**fields)

    def test_rejects_wallet_of_another_user(self, service, wallet_dao):
        foreign = wallet_dao.create("someone-else", "Mandiri")
        with pytest.raises(ValueError, match="Source wallet not found"):
            service.create(USER, "Kos", 1000, "outcome", "Tagihan", foreign.id)

    def test_rejects_inactive_wallet(self, service, wallet_dao, wallets):
        wallet_dao.set_active(wallets[0].id, False)
        with pytest.raises(ValueError, match="Source wallet not found"):
            service.create(USER, "Kos", 1000, "outcome", "Tagihan", wallets[0].id)

    def test_transfer_requires_target(self, service, wallets):
        with pytest.raises(ValueError, match="target wallet"):
            service.create(USER, "Nabung", 1000, "transfer", "", wallets[0].id)

    def test_transfer_target_must_differ(self, service, wallets):
        bca, _ = wallets
        with pytest.raises(ValueError, match="must differ"):
            service.create(USER, "Nabung", 1000, "transfer", "", bca.id, target_wallet_id=bca.id)

    def test_transfer_target_must_exist(self, service, wallets):
        with pytest.raises(ValueError, match="Target wallet not found"):
            service.create(USER, "Nabung", 1000, "transfer", "", wallets[0].id, target_wallet_id=999)


class TestUpdate:
    def test_updates_fields_and_keeps_marker(self, service, recurring_dao, wallets):
        bca, _ = wallets
        template = service.create(USER, "Kos", 1_500_000, "outcome", "Tagihan", bca.id)
        recurring_dao.update_last_generated(template.id, "2024-03-01T08:00:00", None)

        updated = service.update(
            template.id, "Kos Baru", 1_750_000, "outcome", "Tagihan", bca.id, day_of_month=5,
        )

        assert updated.description == "Kos Baru"
        assert updated.amount == 1_750_000
        assert updated.day_of_month == 5
        assert updated.last_generated == "2024-03-01T08:00:00"

    def test_unknown_template(self, service, wallets):
        with pytest.raises(ValueError, match="not found"):
            service.update(99, "X", 1000, "outcome", "", wallets[0].id)

    def test_pause_and_resume(self, service, wallets):
        template = service.create(USER, "Kos", 1000, "outcome", "Tagihan", wallets[0].id)

        service.set_active(template.id, False)
        assert service.get_active(USER) == []

        service.set_active(template.id, True)
        assert [t.id for t in service.get_active(USER)] == [template.id]

    def test_delete_keeps_generated_transactions(self, service, tx_dao, sqlite_store, wallets):
        template = service.create(USER, "Kos", 1000, "outcome", "Tagihan", wallets[0].id)
        RecurringProcessor(sqlite_store).generate_now(template.id, date(2024, 3, 1))

        service.delete(template.id)

        assert service.get_by_id(template.id) is None
        rows = tx_dao.get_by_user(USER)
        assert len(rows) == 1
        assert rows[0].recurring_template_id is None


class TestNextDueDate:
    def test_inactive_has_no_next_date(self, service):
        assert service.next_due_date(_template(is_active=False), date(2024, 3, 1)) is None

    def test_later_this_month(self, service):
        assert service.next_due_date(_template(), date(2024, 3, 10)) == date(2024, 3, 15)

    def test_on_the_day_itself(self, service):
        assert service.next_due_date(_template(), date(2024, 3, 15)) == date(2024, 3, 15)

    def test_rolls_to_next_month(self, service):
        assert service.next_due_date(_template(), date(2024, 3, 16)) == date(2024, 4, 15)

    def test_already_generated_today(self, service):
        template = _template(last_generated="2024-03-15T09:30:00")
        assert service.next_due_date(template, date(2024, 3, 15)) == date(2024, 4, 15)

    def test_skips_months_without_the_day(self, service):
        template = _template(day_of_month=31)
        assert service.next_due_date(template, date(2024, 4, 1)) == date(2024, 5, 31)

    def test_day_30_skips_february(self, service):
        template = _template(day_of_month=30)
        assert service.next_due_date(template, date(2024, 2, 1)) == date(2024, 3, 30)

    def test_crosses_year_end(self, service):
        assert service.next_due_date(_template(), date(2024, 12, 20)) == date(2025, 1, 15)

    def test_weekly_never_generated(self, service):
        template = _template(frequency="weekly")
        assert service.next_due_date(template, date(2024, 3, 10)) == date(2024, 3, 10)

    def test_weekly_after_last_generation(self, service):
        template = _template(frequency="weekly", last_generated="2024-03-08T07:00:00")
        assert service.next_due_date(template, date(2024, 3, 10)) == date(2024, 3, 15)
        assert service.next_due_date(template, date(2024, 3, 20)) == date(2024, 3, 20)
