import customtkinter as ctk
from database.db_manager import DatabaseManager
from services.budget_service import BudgetService
from services.goal_service import GoalService
from services.recurring_processor import ProcessResult, RecurringProcessor
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService
from services.wallet_service import WalletService
from ui.components.run_banner import RunBanner
from ui.components.process_result_dialog import ProcessResultDialog
from ui.tabs.budgets_tab import BudgetsTab
from ui.tabs.goals_tab import GoalsTab
from ui.tabs.recurring_tab import RecurringTab
from ui.tabs.transactions_tab import TransactionsTab
from ui.tabs.wallets_tab import WalletsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT


_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"wallets", "transactions", "budgets", "goals", "recurring"},
    "recurring":   {"recurring"},
    "wallet":      {"wallets", "transactions", "goals", "recurring"},
    "budget":      {"budgets"},
    "goal":        {"goals"},
    "full":        {"wallets", "transactions", "budgets", "goals", "recurring"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        recurring_service: RecurringService,
        wallet_service: WalletService,
        tx_service: TransactionService,
        budget_service: BudgetService,
        goal_service: GoalService,
        processor: RecurringProcessor,
        user_id: str,
        db: DatabaseManager | None = None,
        startup_result: ProcessResult | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._recurring_svc = recurring_service
        self._wallet_svc = wallet_service
        self._tx_svc = tx_service
        self._budget_svc = budget_service
        self._goal_svc = goal_service
        self._processor = processor
        self._user_id = user_id
        self._startup_result = startup_result
        self._symbol = db.get_setting("currency_symbol", "Rp") if db else "Rp"

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        if startup_result and startup_result.has_errors and not startup_result.processed:
            self.after(200, self._show_startup_dialog)
        elif startup_result and (startup_result.processed or startup_result.has_errors):
            self.after(300, self._show_recurring_banner)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Wallets", "Transactions", "Budgets", "Goals", "Recurring"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._wallets_tab = WalletsTab(
            self._tabview.tab("Wallets"),
            wallet_service=self._wallet_svc,
            tx_service=self._tx_svc,
            user_id=self._user_id,
            notify_refresh=self.notify_tabs_refresh,
            currency_symbol=self._symbol,
        )
        self._wallets_tab.grid(row=0, column=0, sticky="nsew")

        self._transactions_tab = TransactionsTab(
            self._tabview.tab("Transactions"),
            tx_service=self._tx_svc,
            wallet_service=self._wallet_svc,
            user_id=self._user_id,
            notify_refresh=self.notify_tabs_refresh,
            currency_symbol=self._symbol,
        )
        self._transactions_tab.grid(row=0, column=0, sticky="nsew")

        self._budgets_tab = BudgetsTab(
            self._tabview.tab("Budgets"),
            budget_service=self._budget_svc,
            user_id=self._user_id,
            notify_refresh=self.notify_tabs_refresh,
            currency_symbol=self._symbol,
        )
        self._budgets_tab.grid(row=0, column=0, sticky="nsew")

        self._goals_tab = GoalsTab(
            self._tabview.tab("Goals"),
            goal_service=self._goal_svc,
            wallet_service=self._wallet_svc,
            user_id=self._user_id,
            notify_refresh=self.notify_tabs_refresh,
            currency_symbol=self._symbol,
        )
        self._goals_tab.grid(row=0, column=0, sticky="nsew")

        self._recurring_tab = RecurringTab(
            self._tabview.tab("Recurring"),
            recurring_service=self._recurring_svc,
            wallet_service=self._wallet_svc,
            processor=self._processor,
            tx_service=self._tx_svc,
            user_id=self._user_id,
            notify_refresh=self.notify_tabs_refresh,
            currency_symbol=self._symbol,
        )
        self._recurring_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "wallets"   in tabs: self._wallets_tab.refresh()
        if "transactions" in tabs: self._transactions_tab.refresh()
        if "budgets"   in tabs: self._budgets_tab.refresh()
        if "goals"     in tabs: self._goals_tab.refresh()
        if "recurring" in tabs: self._recurring_tab.refresh()

    # ── Banners & dialogs ────────────────────────────────────────────────────
    def _show_recurring_banner(self):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        banner = RunBanner(
            self._banner_frame,
            self._startup_result,
            on_view=lambda: self._tabview.set("Transactions"),
            on_details=self._show_startup_dialog,
        )
        banner.pack(fill="x", pady=2)

    def _show_startup_dialog(self):
        ProcessResultDialog(self, self._startup_result)
