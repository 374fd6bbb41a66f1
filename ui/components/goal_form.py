import customtkinter as ctk
from models.goal import Goal
from services.goal_service import GoalService
from services.wallet_service import WalletService
from utils.constants import DEFAULT_GOAL_COLOR, GOAL_COLORS
from utils.currency import format_currency, parse_amount

_NO_WALLET = "(not linked)"


class GoalForm(ctk.CTkToplevel):
    """Add or edit a savings goal."""

    def __init__(
        self,
        master,
        goal_service: GoalService,
        wallet_service: WalletService,
        user_id: str,
        goal: Goal | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = goal_service
        self._user_id = user_id
        self._goal = goal
        self.saved = False

        self.title("Edit Goal" if goal else "New Goal")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._wallets = wallet_service.get_active(user_id)
        wallet_names = [_NO_WALLET] + [w.name for w in self._wallets]
        linked = next((w.name for w in self._wallets if goal and w.id == goal.wallet_id), _NO_WALLET)

        r = 0
        self._name_var = self._entry("Name:", r, goal.name if goal else "")
        r += 1
        self._target_var = self._entry("Target:", r, self._amount_text(goal.target_amount) if goal else "")
        r += 1
        self._label("Linked Wallet:", r)
        self._wallet_var = ctk.StringVar(value=linked)
        ctk.CTkComboBox(
            self, values=wallet_names, variable=self._wallet_var, width=220,
            state="readonly", command=lambda _: self._on_wallet_change(),
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1
        self._label("Saved So Far:", r)
        self._current_var = ctk.StringVar(
            value=self._amount_text(goal.current_amount) if goal else "0"
        )
        self._current_entry = ctk.CTkEntry(self, textvariable=self._current_var, width=220)
        self._current_entry.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1
        self._deadline_var = self._entry("Deadline:", r, (goal.deadline or "") if goal else "")
        r += 1

        self._label("Color:", r)
        self._color_var = ctk.StringVar(value=goal.color if goal else DEFAULT_GOAL_COLOR)
        swatches = ctk.CTkFrame(self, fg_color="transparent")
        swatches.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for color in GOAL_COLORS:
            ctk.CTkRadioButton(
                swatches, text="", width=20, variable=self._color_var, value=color,
                fg_color=color, hover_color=color,
            ).pack(side="left", padx=1)
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self._on_wallet_change()
        self.transient(master)
        self.grab_set()
        self._center()

    @staticmethod
    def _amount_text(amount: int) -> str:
        return format_currency(amount, "").strip()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _entry(self, label, row, value="") -> ctk.StringVar:
        self._label(label, row)
        var = ctk.StringVar(value=value)
        ctk.CTkEntry(self, textvariable=var, width=220).grid(
            row=row, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        return var

    def _on_wallet_change(self):
        # A linked wallet's balance is the saved amount
        linked = self._wallet_var.get() != _NO_WALLET
        self._current_entry.configure(state="disabled" if linked else "normal")

    def _on_save(self):
        try:
            target = parse_amount(self._target_var.get())
            current = parse_amount(self._current_var.get() or "0")
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        wallet = next((w for w in self._wallets if w.name == self._wallet_var.get()), None)
        args = (
            self._name_var.get(), target, current,
            wallet.id if wallet else None,
            self._deadline_var.get(), self._color_var.get(),
        )
        try:
            if self._goal:
                self._svc.update(self._goal.id, *args)
            else:
                self._svc.create(self._user_id, *args)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
