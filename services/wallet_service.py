from models.wallet import Wallet
from database.wallet_dao import WalletDAO
from utils.constants import WALLET_TYPES


class WalletService:
    def __init__(self, wallet_dao: WalletDAO):
        self._dao = wallet_dao

    def get_active(self, user_id: str) -> list[Wallet]:
        return self._dao.get_active(user_id)

    def get_by_id(self, wallet_id: int) -> Wallet | None:
        return self._dao.get_by_id(wallet_id)

    def get_balances(self, user_id: str) -> dict[int, int]:
        """Return {wallet_id: current balance} for the user's active wallets."""
        return {w.id: w.current_balance for w in self._dao.get_active(user_id)}

    def get_total_balance(self, user_id: str) -> int:
        return sum(self.get_balances(user_id).values())

    def get_names(self, wallet_ids) -> dict[int, str]:
        """Names for display, including deactivated wallets."""
        return self._dao.get_names(list(wallet_ids))

    def create(
        self,
        user_id: str,
        name: str,
        type_: str = "cash",
        initial_balance: int = 0,
    ) -> Wallet:
        name = name.strip()
        if not name:
            raise ValueError("Wallet name cannot be empty.")
        if self._dao.get_by_name(user_id, name):
            raise ValueError(f"A wallet named '{name}' already exists.")
        self._validate_type(type_)
        if not isinstance(initial_balance, int) or initial_balance < 0:
            raise ValueError("Initial balance must be 0 or greater.")
        return self._dao.create(user_id, name, type_, initial_balance)

    def update(self, wallet_id: int, name: str, type_: str) -> Wallet:
        current = self._dao.get_by_id(wallet_id)
        if current is None:
            raise ValueError("Wallet not found.")
        name = name.strip()
        if not name:
            raise ValueError("Wallet name cannot be empty.")
        existing = self._dao.get_by_name(current.user_id, name)
        if existing and existing.id != wallet_id:
            raise ValueError(f"A wallet named '{name}' already exists.")
        self._validate_type(type_)
        return self._dao.update(wallet_id, name, type_)

    def deactivate(self, wallet_id: int):
        """Hide the wallet; its transactions stay in the ledger."""
        self._dao.set_active(wallet_id, False)

    @staticmethod
    def _validate_type(type_: str):
        if type_ not in WALLET_TYPES:
            raise ValueError(
                f"Invalid wallet type '{type_}'. "
                f"Must be one of: {', '.join(WALLET_TYPES)}."
            )
