from dataclasses import dataclass


@dataclass
class Budget:
    id: int
    user_id: str
    category: str
    month: str          # 'YYYY-MM'
    limit_amount: int
    spent_amount: int = 0   # filled from the ledger by BudgetService

    @property
    def percentage(self) -> float:
        if self.limit_amount <= 0:
            return 0.0
        return self.spent_amount / self.limit_amount

    @property
    def remaining(self) -> int:
        return max(0, self.limit_amount - self.spent_amount)

    @property
    def is_over(self) -> bool:
        return self.spent_amount > self.limit_amount
