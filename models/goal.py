from dataclasses import dataclass
from typing import Optional

from utils.constants import DEFAULT_GOAL_COLOR


@dataclass
class Goal:
    id: int
    user_id: str
    name: str
    target_amount: int
    current_amount: int = 0
    wallet_id: Optional[int] = None     # linked wallet's balance replaces current_amount
    deadline: Optional[str] = None      # 'YYYY-MM-DD'
    color: str = DEFAULT_GOAL_COLOR
    created_at: str = ""


@dataclass
class GoalProgress:
    goal: Goal
    current_amount: int
    wallet_name: Optional[str] = None

    @property
    def percentage(self) -> float:
        """Share of the target reached, capped at 1.0."""
        if self.goal.target_amount <= 0:
            return 0.0
        return min(max(self.current_amount, 0) / self.goal.target_amount, 1.0)

    @property
    def remaining(self) -> int:
        return max(0, self.goal.target_amount - self.current_amount)

    @property
    def is_reached(self) -> bool:
        return self.current_amount >= self.goal.target_amount
