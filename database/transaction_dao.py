from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction, TransactionDraft


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            user_id=row["user_id"],
            wallet_id=row["wallet_id"],
            description=row["description"],
            category=row["category"],
            date=row["date"],
            income=row["income"],
            outcome=row["outcome"],
            saving=row["saving"],
            is_transfer=bool(row["is_transfer"]),
            transfer_from_wallet_id=row["transfer_from_wallet_id"],
            transfer_to_wallet_id=row["transfer_to_wallet_id"],
            recurring_template_id=row["recurring_template_id"],
            created_at=row["created_at"],
        )

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_user(self, user_id: str, month: str | None = None) -> list[Transaction]:
        conn = self._db.get_connection()
        sql = "SELECT * FROM transactions WHERE user_id = ?"
        params: list = [user_id]
        if month:
            sql += " AND strftime('%Y-%m', date) = ?"
            params.append(month)
        sql += " ORDER BY date ASC, id ASC"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_wallet(self, wallet_id: int, month: str | None = None) -> list[Transaction]:
        conn = self._db.get_connection()
        sql = "SELECT * FROM transactions WHERE wallet_id = ?"
        params: list = [wallet_id]
        if month:
            sql += " AND strftime('%Y-%m', date) = ?"
            params.append(month)
        sql += " ORDER BY date ASC, id ASC"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_template(self, template_id: int) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions WHERE recurring_template_id = ? ORDER BY date, id",
            (template_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(self, draft: TransactionDraft) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (user_id, wallet_id, description, category, date,
                income, outcome, saving, is_transfer,
                transfer_from_wallet_id, transfer_to_wallet_id, recurring_template_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                draft.user_id, draft.wallet_id, draft.description, draft.category,
                draft.date, draft.income, draft.outcome, draft.saving,
                1 if draft.is_transfer else 0,
                draft.transfer_from_wallet_id, draft.transfer_to_wallet_id,
                draft.recurring_template_id,
            ),
        )
        return self.get_by_id(cursor.lastrowid)

    def create_many(self, drafts: list[TransactionDraft]) -> list[Transaction]:
        """Write every draft or none of them."""
        with self._db.unit_of_work():
            return [self.create(d) for d in drafts]

    def get_totals_by_wallet(self, wallet_id: int, month: str) -> dict:
        """Return income, outcome, saving totals for one wallet/month."""
        conn = self._db.get_connection()
        row = conn.execute(
            """SELECT SUM(income) AS income,
                      SUM(outcome) AS outcome,
                      SUM(saving) AS saving
               FROM transactions
               WHERE wallet_id = ?
                 AND is_transfer = 0
                 AND strftime('%Y-%m', date) = ?""",
            (wallet_id, month),
        ).fetchone()
        return {
            "income": row["income"] or 0,
            "outcome": row["outcome"] or 0,
            "saving": row["saving"] or 0,
        }

    def get_spending_by_category(self, user_id: str, month: str) -> dict[str, int]:
        """Sum of outcome per category for the month across all wallets, transfers excluded."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT category, SUM(outcome) AS total
               FROM transactions
               WHERE user_id = ?
                 AND is_transfer = 0
                 AND outcome > 0
                 AND strftime('%Y-%m', date) = ?
               GROUP BY category""",
            (user_id, month),
        ).fetchall()
        return {r["category"]: r["total"] for r in rows}

    def find_transfer_partner(self, tx: Transaction) -> Optional[Transaction]:
        """The other leg of a transfer: same wallets, date and amount, opposite side."""
        if not tx.is_transfer:
            return None
        if tx.outcome:
            wallet_id, income, outcome = tx.transfer_to_wallet_id, tx.outcome, 0
        else:
            wallet_id, income, outcome = tx.transfer_from_wallet_id, 0, tx.income
        conn = self._db.get_connection()
        row = conn.execute(
            """SELECT * FROM transactions
               WHERE is_transfer = 1 AND id != ? AND wallet_id = ?
                 AND transfer_from_wallet_id = ? AND transfer_to_wallet_id = ?
                 AND date = ? AND income = ? AND outcome = ?
                 AND recurring_template_id IS ?
               ORDER BY ABS(id - ?)
               LIMIT 1""",
            (
                tx.id, wallet_id, tx.transfer_from_wallet_id, tx.transfer_to_wallet_id,
                tx.date, income, outcome, tx.recurring_template_id, tx.id,
            ),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def delete_many(self, tx_ids: list[int]):
        with self._db.unit_of_work() as conn:
            for tx_id in tx_ids:
                conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
