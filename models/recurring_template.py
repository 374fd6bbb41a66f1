from dataclasses import dataclass
from typing import Optional

from utils.constants import KIND_TRANSFER


@dataclass
class RecurringTemplate:
    id: int
    user_id: str
    description: str
    amount: int             # minor units, > 0
    kind: str               # 'income' | 'outcome' | 'saving' | 'transfer'
    category: str
    wallet_id: int          # source wallet for every kind
    frequency: str          # 'monthly' | 'weekly'
    day_of_month: int       # 1-31, ignored for weekly
    is_active: bool = True
    target_wallet_id: Optional[int] = None   # transfer only
    last_generated: Optional[str] = None     # ISO timestamp of last materialization
    created_at: str = ""

    @property
    def is_transfer(self) -> bool:
        return self.kind == KIND_TRANSFER
