import customtkinter as ctk
from models.goal import GoalProgress
from services.goal_service import GoalService
from services.wallet_service import WalletService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.goal_form import GoalForm
from utils.currency import format_currency
from utils.date_helpers import friendly_date


class GoalsTab(ctk.CTkFrame):
    """Savings goals with a progress bar each."""

    def __init__(
        self,
        master,
        goal_service: GoalService,
        wallet_service: WalletService,
        user_id: str,
        notify_refresh,
        currency_symbol: str = "Rp",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = goal_service
        self._wallet_svc = wallet_service
        self._user_id = user_id
        self._notify_refresh = notify_refresh
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Savings Goals", font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Goal", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        progress = self._svc.get_progress(self._user_id)
        if not progress:
            ctk.CTkLabel(
                self._scroll,
                text="No savings goals yet. Click '+ Add Goal' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        for idx, p in enumerate(progress):
            self._add_goal_card(idx, p)

    def _add_goal_card(self, idx, p: GoalProgress):
        goal = p.goal
        card = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        card.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        card.grid_columnconfigure(0, weight=1)

        hdr = ctk.CTkFrame(card, fg_color="transparent")
        hdr.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 4))
        hdr.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            hdr, text=goal.name,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w")
        ctk.CTkLabel(
            hdr, text="Reached" if p.is_reached else f"{p.percentage * 100:.0f}%",
            text_color="#4CAF50" if p.is_reached else goal.color,
        ).grid(row=0, column=1, padx=(8, 0))
        ctk.CTkButton(
            hdr, text="Edit", width=50, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._open_edit(goal),
        ).grid(row=0, column=2, padx=(8, 0))
        ctk.CTkButton(
            hdr, text="✕", width=28, height=24,
            fg_color="transparent", text_color="#F44336",
            hover_color=("gray80", "gray30"),
            command=lambda: self._delete(goal),
        ).grid(row=0, column=3, padx=(4, 0))

        parts = [
            f"{format_currency(p.current_amount, self._symbol)} of "
            f"{format_currency(goal.target_amount, self._symbol)}",
        ]
        if not p.is_reached:
            parts.append(f"{format_currency(p.remaining, self._symbol)} to go")
        if p.wallet_name:
            parts.append(f"Wallet: {p.wallet_name}")
        if goal.deadline:
            parts.append(f"Due {friendly_date(goal.deadline)}")
        ctk.CTkLabel(card, text="  |  ".join(parts), text_color="gray60", anchor="w").grid(
            row=1, column=0, padx=12, sticky="ew"
        )

        progress = ctk.CTkProgressBar(card, progress_color=goal.color)
        progress.grid(row=2, column=0, padx=12, pady=(4, 10), sticky="ew")
        progress.set(p.percentage)

    def _open_add(self):
        form = GoalForm(self.winfo_toplevel(), self._svc, self._wallet_svc, self._user_id)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("goal")

    def _open_edit(self, goal):
        form = GoalForm(
            self.winfo_toplevel(), self._svc, self._wallet_svc, self._user_id, goal=goal,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("goal")

    def _delete(self, goal):
        dlg = ConfirmDialog(
            self.winfo_toplevel(), "Delete Goal",
            f"Delete the goal '{goal.name}'? Linked wallets and their "
            "transactions are not affected.",
            confirm_text="Delete", destructive=True,
        )
        if dlg.result:
            self._svc.delete(goal.id)
            self._notify_refresh("goal")
