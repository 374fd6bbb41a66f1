from dataclasses import dataclass
from typing import Optional


@dataclass
class TransactionDraft:
    """A ledger row that has not been written yet."""
    user_id: str
    wallet_id: int
    description: str
    category: str
    date: str               # 'YYYY-MM-DD'
    income: int = 0
    outcome: int = 0
    saving: int = 0
    is_transfer: bool = False
    transfer_from_wallet_id: Optional[int] = None
    transfer_to_wallet_id: Optional[int] = None
    recurring_template_id: Optional[int] = None


@dataclass
class Transaction:
    id: int
    user_id: str
    wallet_id: int
    description: str
    category: str
    date: str               # 'YYYY-MM-DD'
    income: int = 0
    outcome: int = 0
    saving: int = 0
    is_transfer: bool = False
    transfer_from_wallet_id: Optional[int] = None
    transfer_to_wallet_id: Optional[int] = None
    recurring_template_id: Optional[int] = None
    created_at: str = ""

    @property
    def net(self) -> int:
        """Effect of this row on its wallet's balance."""
        return self.income - self.outcome - self.saving
