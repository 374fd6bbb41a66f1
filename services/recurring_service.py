import calendar
from datetime import date, timedelta
from models.recurring_template import RecurringTemplate
from database.recurring_dao import RecurringDAO
from database.wallet_dao import WalletDAO
from utils.constants import (
    FREQUENCIES, FREQUENCY_MONTHLY, FREQUENCY_WEEKLY, KIND_TRANSFER,
    TEMPLATE_KINDS, WEEKLY_INTERVAL_DAYS,
)
from utils.date_helpers import calendar_date, today


class RecurringService:
    def __init__(self, recurring_dao: RecurringDAO, wallet_dao: WalletDAO):
        self._dao = recurring_dao
        self._wallet_dao = wallet_dao

    def get_all(self, user_id: str) -> list[RecurringTemplate]:
        return self._dao.get_all(user_id)

    def get_active(self, user_id: str) -> list[RecurringTemplate]:
        return self._dao.get_active(user_id)

    def get_by_id(self, template_id: int) -> RecurringTemplate | None:
        return self._dao.get_by_id(template_id)

    def create(
        self,
        user_id: str,
        description: str,
        amount: int,
        kind: str,
        category: str,
        wallet_id: int,
        frequency: str = FREQUENCY_MONTHLY,
        day_of_month: int = 1,
        target_wallet_id: int | None = None,
    ) -> RecurringTemplate:
        description = description.strip()
        target_wallet_id = self._validate(
            user_id, description, amount, kind, wallet_id, target_wallet_id,
            frequency, day_of_month,
        )
        return self._dao.create(
            user_id=user_id, description=description, amount=amount, kind=kind,
            category=category, wallet_id=wallet_id, frequency=frequency,
            day_of_month=day_of_month, target_wallet_id=target_wallet_id,
        )

    def update(
        self,
        template_id: int,
        description: str,
        amount: int,
        kind: str,
        category: str,
        wallet_id: int,
        frequency: str = FREQUENCY_MONTHLY,
        day_of_month: int = 1,
        target_wallet_id: int | None = None,
        is_active: bool = True,
    ) -> RecurringTemplate:
        current = self._dao.get_by_id(template_id)
        if current is None:
            raise ValueError("Recurring template not found.")
        description = description.strip()
        target_wallet_id = self._validate(
            current.user_id, description, amount, kind, wallet_id,
            target_wallet_id, frequency, day_of_month,
        )
        return self._dao.update(
            template_id=template_id, description=description, amount=amount,
            kind=kind, category=category, wallet_id=wallet_id,
            frequency=frequency, day_of_month=day_of_month,
            target_wallet_id=target_wallet_id, is_active=is_active,
        )

    def set_active(self, template_id: int, is_active: bool):
        self._dao.set_active(template_id, is_active)

    def delete(self, template_id: int):
        self._dao.delete(template_id)

    def next_due_date(
        self, template: RecurringTemplate, after: date | None = None
    ) -> date | None:
        """First day on or after `after` (default: today) the template will fire.

        Inactive templates have no next date. Monthly templates skip months
        that lack their day of month.
        """
        if not template.is_active:
            return None
        ref = after or today()
        last = calendar_date(template.last_generated)
        if last is not None and last >= ref:
            ref = last + timedelta(days=1)

        if template.frequency == FREQUENCY_WEEKLY:
            if last is None:
                return ref
            return max(ref, last + timedelta(days=WEEKLY_INTERVAL_DAYS))

        if template.frequency == FREQUENCY_MONTHLY:
            return self._first_monthly_on_or_after(template.day_of_month, ref)

        return None

    def _first_monthly_on_or_after(self, day_of_month: int, from_date: date) -> date | None:
        y, m = from_date.year, from_date.month
        # A day that exists in some month is always reached within a year
        for _ in range(13):
            if day_of_month <= calendar.monthrange(y, m)[1]:
                candidate = date(y, m, day_of_month)
                if candidate >= from_date:
                    return candidate
            m += 1
            if m > 12:
                y, m = y + 1, 1
        return None

    def _validate(
        self,
        user_id: str,
        description: str,
        amount: int,
        kind: str,
        wallet_id: int,
        target_wallet_id: int | None,
        frequency: str,
        day_of_month: int,
    ) -> int | None:
        """Raise ValueError on bad input; returns the target wallet id to store."""
        if not description:
            raise ValueError("Description cannot be empty.")
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise ValueError("Amount must be a positive whole number.")
        if kind not in TEMPLATE_KINDS:
            raise ValueError(
                f"Invalid type '{kind}'. Must be one of: {', '.join(TEMPLATE_KINDS)}."
            )
        if frequency not in FREQUENCIES:
            raise ValueError("Invalid frequency.")
        if frequency == FREQUENCY_MONTHLY and not 1 <= day_of_month <= 31:
            raise ValueError("Day of month must be between 1 and 31.")
        self._require_wallet(user_id, wallet_id, "Source wallet")

        if kind != KIND_TRANSFER:
            return None
        if target_wallet_id is None:
            raise ValueError("Please choose a target wallet for the transfer.")
        if target_wallet_id == wallet_id:
            raise ValueError("Source and target wallet must differ.")
        self._require_wallet(user_id, target_wallet_id, "Target wallet")
        return target_wallet_id

    def _require_wallet(self, user_id: str, wallet_id: int, label: str):
        wallet = self._wallet_dao.get_by_id(wallet_id)
        if wallet is None or wallet.user_id != user_id or not wallet.is_active:
            raise ValueError(f"{label} not found.")
