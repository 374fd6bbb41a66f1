from typing import Optional
from database.db_manager import DatabaseManager
from models.budget import Budget


class BudgetDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Budget:
        return Budget(
            id=row["id"],
            user_id=row["user_id"],
            category=row["category"],
            month=row["month"],
            limit_amount=row["limit_amount"],
        )

    def get_by_month(self, user_id: str, month: str) -> list[Budget]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM budgets WHERE user_id = ? AND month = ? ORDER BY category",
            (user_id, month),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_category_month(self, user_id: str, category: str, month: str) -> Optional[Budget]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM budgets WHERE user_id = ? AND category = ? AND month = ?",
            (user_id, category, month),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def upsert(self, user_id: str, category: str, month: str, limit_amount: int) -> Budget:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO budgets(user_id, category, month, limit_amount)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(user_id, category, month)
               DO UPDATE SET limit_amount = excluded.limit_amount""",
            (user_id, category, month, limit_amount),
        )
        return self.get_by_category_month(user_id, category, month)

    def delete(self, budget_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM budgets WHERE id = ?", (budget_id,))

    def copy_month(self, user_id: str, from_month: str, to_month: str) -> int:
        """Copy all budget limits from one month to another. Returns count copied."""
        with self._db.unit_of_work() as conn:
            rows = conn.execute(
                "SELECT category, limit_amount FROM budgets WHERE user_id = ? AND month = ?",
                (user_id, from_month),
            ).fetchall()
            for row in rows:
                conn.execute(
                    """INSERT INTO budgets(user_id, category, month, limit_amount)
                       VALUES (?, ?, ?, ?)
                       ON CONFLICT(user_id, category, month)
                       DO UPDATE SET limit_amount = excluded.limit_amount""",
                    (user_id, row["category"], to_month, row["limit_amount"]),
                )
        return len(rows)
