import logging
from models.goal import Goal, GoalProgress
from database.goal_dao import GoalDAO
from database.wallet_dao import WalletDAO
from utils.constants import DEFAULT_GOAL_COLOR
from utils.date_helpers import parse_date

logger = logging.getLogger(__name__)


class GoalService:
    """Savings goals, optionally tracking a wallet's balance."""

    def __init__(self, goal_dao: GoalDAO, wallet_dao: WalletDAO):
        self._dao = goal_dao
        self._wallet_dao = wallet_dao

    def get_progress(self, user_id: str) -> list[GoalProgress]:
        """Each goal with the amount saved so far.

        A goal linked to an active wallet follows that wallet's balance;
        otherwise the manually entered amount counts.
        """
        wallets = {w.id: w for w in self._wallet_dao.get_active(user_id)}
        progress = []
        for goal in self._dao.get_by_user(user_id):
            wallet = wallets.get(goal.wallet_id) if goal.wallet_id is not None else None
            if goal.wallet_id is not None and wallet is None:
                logger.warning(
                    "Goal %s is linked to unavailable wallet %s; using its saved amount",
                    goal.id, goal.wallet_id,
                )
            if wallet is not None:
                progress.append(GoalProgress(goal, wallet.current_balance, wallet.name))
            else:
                progress.append(GoalProgress(goal, goal.current_amount))
        return progress

    def create(
        self,
        user_id: str,
        name: str,
        target_amount: int,
        current_amount: int = 0,
        wallet_id: int | None = None,
        deadline: str | None = None,
        color: str = DEFAULT_GOAL_COLOR,
    ) -> Goal:
        name = name.strip()
        deadline = self._validate(user_id, name, target_amount, current_amount, wallet_id, deadline)
        return self._dao.create(
            user_id, name, target_amount, current_amount, wallet_id, deadline, color,
        )

    def update(
        self,
        goal_id: int,
        name: str,
        target_amount: int,
        current_amount: int = 0,
        wallet_id: int | None = None,
        deadline: str | None = None,
        color: str = DEFAULT_GOAL_COLOR,
    ) -> Goal:
        current = self._dao.get_by_id(goal_id)
        if current is None:
            raise ValueError("Goal not found.")
        name = name.strip()
        deadline = self._validate(
            current.user_id, name, target_amount, current_amount, wallet_id, deadline,
        )
        return self._dao.update(
            goal_id, name, target_amount, current_amount, wallet_id, deadline, color,
        )

    def delete(self, goal_id: int):
        self._dao.delete(goal_id)

    def _validate(
        self,
        user_id: str,
        name: str,
        target_amount: int,
        current_amount: int,
        wallet_id: int | None,
        deadline: str | None,
    ) -> str | None:
        """Raise ValueError on bad input; returns the deadline to store."""
        if not name:
            raise ValueError("Goal name cannot be empty.")
        if not _is_whole(target_amount) or target_amount <= 0:
            raise ValueError("Target amount must be a positive whole number.")
        if not _is_whole(current_amount) or current_amount < 0:
            raise ValueError("Current amount must be 0 or greater.")
        if wallet_id is not None:
            wallet = self._wallet_dao.get_by_id(wallet_id)
            if wallet is None or wallet.user_id != user_id or not wallet.is_active:
                raise ValueError("Linked wallet not found.")
        deadline = (deadline or "").strip()
        if not deadline:
            return None
        if parse_date(deadline) is None:
            raise ValueError("Invalid deadline. Use YYYY-MM-DD.")
        return deadline


def _is_whole(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
