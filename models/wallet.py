from dataclasses import dataclass

from utils.constants import WALLET_TYPE_LABELS


@dataclass
class Wallet:
    id: int
    user_id: str
    name: str
    type: str = "cash"
    initial_balance: int = 0
    is_active: bool = True
    created_at: str = ""
    current_balance: int = 0    # derived from the ledger, never written directly

    @property
    def type_label(self) -> str:
        return WALLET_TYPE_LABELS.get(self.type, self.type.title())
