from models.budget import Budget
from database.budget_dao import BudgetDAO
from database.transaction_dao import TransactionDAO
from utils.constants import BUDGET_CATEGORIES
from utils.date_helpers import current_month_str, parse_month, prev_month


class BudgetService:
    def __init__(self, budget_dao: BudgetDAO, tx_dao: TransactionDAO):
        self._budget_dao = budget_dao
        self._tx_dao = tx_dao

    def get_budget_status(self, user_id: str, month: str | None = None) -> list[Budget]:
        """Return the user's budgets for the month with spent amounts filled in."""
        if month is None:
            month = current_month_str()
        budgets = self._budget_dao.get_by_month(user_id, month)
        spending = self._tx_dao.get_spending_by_category(user_id, month)
        for b in budgets:
            b.spent_amount = spending.get(b.category, 0)
        return budgets

    def upsert(self, user_id: str, category: str, month: str, limit_amount: int) -> Budget:
        category = category.strip()
        if not category:
            raise ValueError("Please select a category.")
        if parse_month(month) is None:
            raise ValueError("Invalid month. Use YYYY-MM.")
        if not isinstance(limit_amount, int) or isinstance(limit_amount, bool) or limit_amount < 0:
            raise ValueError("Budget limit must be non-negative.")
        return self._budget_dao.upsert(user_id, category, month, limit_amount)

    def delete(self, budget_id: int):
        self._budget_dao.delete(budget_id)

    def copy_from_previous_month(self, user_id: str, to_month: str) -> int:
        return self._budget_dao.copy_month(user_id, prev_month(to_month), to_month)

    def get_budget_categories(self) -> list[str]:
        return list(BUDGET_CATEGORIES)
