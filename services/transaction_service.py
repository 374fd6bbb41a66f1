from models.transaction import Transaction, TransactionDraft
from database.transaction_dao import TransactionDAO
from database.wallet_dao import WalletDAO
from utils.constants import (
    ADMIN_FEE_CATEGORY, LEDGER_KINDS, TRANSFER_IN_CATEGORY, TRANSFER_OUT_CATEGORY,
    UNKNOWN_WALLET_NAME,
)
from utils.currency import format_currency
from utils.date_helpers import parse_date


class TransactionService:
    """Manual ledger entries and wallet-to-wallet transfers."""

    def __init__(self, tx_dao: TransactionDAO, wallet_dao: WalletDAO):
        self._dao = tx_dao
        self._wallet_dao = wallet_dao

    def get_for_wallet(self, wallet_id: int, month: str | None = None) -> list[Transaction]:
        return self._dao.get_by_wallet(wallet_id, month)

    def get_for_user(self, user_id: str, month: str | None = None) -> list[Transaction]:
        return self._dao.get_by_user(user_id, month)

    def get_for_template(self, template_id: int) -> list[Transaction]:
        return self._dao.get_by_template(template_id)

    def get_totals(self, wallet_id: int, month: str) -> dict:
        """Income/outcome/saving for the month, transfers excluded."""
        totals = self._dao.get_totals_by_wallet(wallet_id, month)
        totals["net"] = totals["income"] - totals["outcome"] - totals["saving"]
        return totals

    def create_entry(
        self,
        user_id: str,
        wallet_id: int,
        kind: str,
        amount: int,
        date: str,
        category: str,
        description: str = "",
    ) -> Transaction:
        if kind not in LEDGER_KINDS:
            raise ValueError(f"Invalid type: {kind}")
        self._validate(amount, date)
        amounts = {k: amount if k == kind else 0 for k in LEDGER_KINDS}
        return self._dao.create(
            TransactionDraft(
                user_id=user_id,
                wallet_id=wallet_id,
                description=description.strip(),
                category=category,
                date=date,
                **amounts,
            )
        )

    def create_transfer(
        self,
        user_id: str,
        from_wallet_id: int,
        to_wallet_id: int,
        amount: int,
        date: str,
        note: str = "",
        admin_fee: int = 0,
    ) -> list[Transaction]:
        """Atomically write the withdrawal, the deposit and the optional admin fee."""
        if from_wallet_id == to_wallet_id:
            raise ValueError("Source and target wallet must differ.")
        self._validate(amount, date)
        if not isinstance(admin_fee, int) or admin_fee < 0:
            raise ValueError("Admin fee must be 0 or greater.")

        names = self._wallet_dao.get_names([from_wallet_id, to_wallet_id])
        from_name = names.get(from_wallet_id, UNKNOWN_WALLET_NAME)
        to_name = names.get(to_wallet_id, UNKNOWN_WALLET_NAME)
        suffix = f" - {note.strip()}" if note.strip() else ""
        fee_text = f" (Ad: {format_currency(admin_fee)})" if admin_fee else ""

        linkage = dict(
            user_id=user_id,
            date=date,
            is_transfer=True,
            transfer_from_wallet_id=from_wallet_id,
            transfer_to_wallet_id=to_wallet_id,
        )
        drafts = [
            TransactionDraft(
                wallet_id=from_wallet_id,
                description=f"Transfer ke {to_name}{suffix}{fee_text}",
                category=TRANSFER_OUT_CATEGORY,
                outcome=amount,
                **linkage,
            ),
            TransactionDraft(
                wallet_id=to_wallet_id,
                description=f"Transfer dari {from_name}{suffix}",
                category=TRANSFER_IN_CATEGORY,
                income=amount,
                **linkage,
            ),
        ]
        if admin_fee:
            # The fee is real spending, so it is not flagged as a transfer
            drafts.append(
                TransactionDraft(
                    user_id=user_id,
                    wallet_id=from_wallet_id,
                    description=f"Biaya Admin Transfer: {from_name} ke {to_name}",
                    category=ADMIN_FEE_CATEGORY,
                    date=date,
                    outcome=admin_fee,
                )
            )
        return self._dao.create_many(drafts)

    def delete(self, tx_id: int) -> int:
        """Delete a ledger row; a transfer leg takes its counterpart with it.

        Returns the number of rows removed.
        """
        tx = self._dao.get_by_id(tx_id)
        if tx is None:
            return 0
        ids = [tx.id]
        partner = self._dao.find_transfer_partner(tx)
        if partner is not None:
            ids.append(partner.id)
        self._dao.delete_many(ids)
        return len(ids)

    def _validate(self, amount: int, date: str):
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise ValueError("Amount must be a positive whole number.")
        if not parse_date(date):
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")
