from typing import Optional
from database.db_manager import DatabaseManager
from models.goal import Goal
from utils.constants import DEFAULT_GOAL_COLOR


class GoalDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Goal:
        return Goal(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            target_amount=row["target_amount"],
            current_amount=row["current_amount"],
            wallet_id=row["wallet_id"],
            deadline=row["deadline"],
            color=row["color"],
            created_at=row["created_at"],
        )

    def get_by_user(self, user_id: str) -> list[Goal]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM financial_goals WHERE user_id = ? ORDER BY created_at DESC, id DESC",
            (user_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, goal_id: int) -> Optional[Goal]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM financial_goals WHERE id = ?", (goal_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        user_id: str,
        name: str,
        target_amount: int,
        current_amount: int = 0,
        wallet_id: Optional[int] = None,
        deadline: Optional[str] = None,
        color: str = DEFAULT_GOAL_COLOR,
    ) -> Goal:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO financial_goals
               (user_id, name, target_amount, current_amount, wallet_id, deadline, color)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (user_id, name, target_amount, current_amount, wallet_id, deadline, color),
        )
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        goal_id: int,
        name: str,
        target_amount: int,
        current_amount: int,
        wallet_id: Optional[int],
        deadline: Optional[str],
        color: str,
    ) -> Goal:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE financial_goals
               SET name = ?, target_amount = ?, current_amount = ?,
                   wallet_id = ?, deadline = ?, color = ?
               WHERE id = ?""",
            (name, target_amount, current_amount, wallet_id, deadline, color, goal_id),
        )
        return self.get_by_id(goal_id)

    def delete(self, goal_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM financial_goals WHERE id = ?", (goal_id,))
