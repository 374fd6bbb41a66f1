from typing import Optional
from database.db_manager import DatabaseManager
from models.recurring_template import RecurringTemplate


class RecurringDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringTemplate:
        return RecurringTemplate(
            id=row["id"],
            user_id=row["user_id"],
            description=row["description"],
            amount=row["amount"],
            kind=row["kind"],
            category=row["category"],
            wallet_id=row["wallet_id"],
            target_wallet_id=row["target_wallet_id"],
            frequency=row["frequency"],
            day_of_month=row["day_of_month"],
            is_active=bool(row["is_active"]),
            last_generated=row["last_generated"],
            created_at=row["created_at"],
        )

    def get_all(self, user_id: str) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_templates WHERE user_id = ? ORDER BY created_at DESC, id DESC",
            (user_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self, user_id: str) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM recurring_templates
               WHERE user_id = ? AND is_active = 1
               ORDER BY id""",
            (user_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, template_id: int) -> Optional[RecurringTemplate]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_templates WHERE id = ?", (template_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        user_id: str,
        description: str,
        amount: int,
        kind: str,
        category: str,
        wallet_id: int,
        frequency: str,
        day_of_month: int,
        target_wallet_id: int | None = None,
        is_active: bool = True,
    ) -> RecurringTemplate:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO recurring_templates
               (user_id, description, amount, kind, category, wallet_id,
                target_wallet_id, frequency, day_of_month, is_active)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                user_id, description, amount, kind, category, wallet_id,
                target_wallet_id, frequency, day_of_month, 1 if is_active else 0,
            ),
        )
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        template_id: int,
        description: str,
        amount: int,
        kind: str,
        category: str,
        wallet_id: int,
        frequency: str,
        day_of_month: int,
        target_wallet_id: int | None = None,
        is_active: bool = True,
    ) -> RecurringTemplate:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_templates SET
               description=?, amount=?, kind=?, category=?, wallet_id=?,
               target_wallet_id=?, frequency=?, day_of_month=?, is_active=?
               WHERE id=?""",
            (
                description, amount, kind, category, wallet_id,
                target_wallet_id, frequency, day_of_month,
                1 if is_active else 0, template_id,
            ),
        )
        return self.get_by_id(template_id)

    def set_active(self, template_id: int, is_active: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_templates SET is_active = ? WHERE id = ?",
            (1 if is_active else 0, template_id),
        )

    def update_last_generated(
        self, template_id: int, timestamp: str, expected: str | None
    ) -> bool:
        """Compare-and-swap on last_generated.

        Returns False when the stored value no longer equals `expected`,
        i.e. another run advanced the marker first.
        """
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE recurring_templates SET last_generated = ?
               WHERE id = ? AND last_generated IS ?""",
            (timestamp, template_id, expected),
        )
        return cursor.rowcount == 1

    def delete(self, template_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_templates WHERE id = ?", (template_id,))
