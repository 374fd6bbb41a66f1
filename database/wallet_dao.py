from typing import Optional
from database.db_manager import DatabaseManager
from models.wallet import Wallet


class WalletDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Wallet:
        return Wallet(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            type=row["type"],
            initial_balance=row["initial_balance"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            current_balance=row["current_balance"] if "current_balance" in row.keys() else 0,
        )

    def _select(self) -> str:
        # Balance is derived from the ledger on every read
        return """
            SELECT w.*,
                   w.initial_balance + COALESCE((
                       SELECT SUM(t.income - t.outcome - t.saving)
                       FROM transactions t
                       WHERE t.wallet_id = w.id
                   ), 0) AS current_balance
            FROM wallets w
        """

    def get_active(self, user_id: str) -> list[Wallet]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE w.user_id = ? AND w.is_active = 1 ORDER BY w.created_at, w.id",
            (user_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, wallet_id: int) -> Optional[Wallet]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE w.id = ?", (wallet_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, user_id: str, name: str) -> Optional[Wallet]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE w.user_id = ? AND w.name = ? AND w.is_active = 1",
            (user_id, name),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_names(self, wallet_ids: list[int]) -> dict[int, str]:
        """Return {wallet_id: name} for the ids that exist, active or not."""
        if not wallet_ids:
            return {}
        conn = self._db.get_connection()
        placeholders = ",".join("?" * len(wallet_ids))
        rows = conn.execute(
            f"SELECT id, name FROM wallets WHERE id IN ({placeholders})", list(wallet_ids)
        ).fetchall()
        return {r["id"]: r["name"] for r in rows}

    def create(
        self,
        user_id: str,
        name: str,
        type_: str = "cash",
        initial_balance: int = 0,
    ) -> Wallet:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO wallets(user_id, name, type, initial_balance) VALUES (?, ?, ?, ?)",
            (user_id, name, type_, initial_balance),
        )
        return self.get_by_id(cursor.lastrowid)

    def update(self, wallet_id: int, name: str, type_: str) -> Wallet:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE wallets SET name = ?, type = ? WHERE id = ?",
            (name, type_, wallet_id),
        )
        return self.get_by_id(wallet_id)

    def set_active(self, wallet_id: int, is_active: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE wallets SET is_active = ? WHERE id = ?",
            (1 if is_active else 0, wallet_id),
        )
