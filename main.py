import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.budget_dao import BudgetDAO
from database.db_manager import DatabaseManager
from database.goal_dao import GoalDAO
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from database.wallet_dao import WalletDAO
from database.ledger_store import SqliteLedgerStore, StoreError

from services.budget_service import BudgetService
from services.goal_service import GoalService
from services.recurring_processor import ProcessResult, RecurringProcessor, TemplateError
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService
from services.wallet_service import WalletService

from ui.app_window import AppWindow
from utils.app_config import ensure_config, get_db_folder, get_log_level, get_user_id
from utils.constants import LOG_FORMAT

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    if logging.root.handlers:
        return
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def main():
    # ── Bootstrap: pre-DB config and logging ─────────────────────────────────
    configure_logging(get_log_level())
    try:
        ensure_config()
    except OSError as e:
        logger.warning("Could not write default config: %s", e)
    user_id = get_user_id()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=get_db_folder())
    db.seed_default_wallet(user_id)
    logger.info("Opened ledger database %s for user %s", db.db_path, user_id)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    wallet_dao = WalletDAO(db)
    recurring_dao = RecurringDAO(db)
    tx_dao = TransactionDAO(db)
    budget_dao = BudgetDAO(db)
    goal_dao = GoalDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    store = SqliteLedgerStore(db, recurring_dao, wallet_dao, tx_dao)
    processor = RecurringProcessor(store)
    recurring_svc = RecurringService(recurring_dao, wallet_dao)
    wallet_svc = WalletService(wallet_dao)
    tx_svc = TransactionService(tx_dao, wallet_dao)
    budget_svc = BudgetService(budget_dao, tx_dao)
    goal_svc = GoalService(goal_dao, wallet_dao)

    # ── Apply due recurring templates ────────────────────────────────────────
    try:
        startup_result = processor.process_due_templates(user_id)
    except StoreError as e:
        logger.error("Could not run recurring templates: %s", e)
        startup_result = ProcessResult(
            errors=[TemplateError(template="Recurring templates", error=str(e))]
        )

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        recurring_service=recurring_svc,
        wallet_service=wallet_svc,
        tx_service=tx_svc,
        budget_service=budget_svc,
        goal_service=goal_svc,
        processor=processor,
        user_id=user_id,
        db=db,
        startup_result=startup_result,
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
