import customtkinter as ctk
from models.transaction import Transaction
from services.transaction_service import TransactionService
from services.wallet_service import WalletService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.transaction_form import TransactionForm
from utils.currency import format_signed
from utils.date_helpers import current_month_str, friendly_date, friendly_month, next_month, prev_month

_ALL_WALLETS = "All wallets"


class TransactionsTab(ctk.CTkFrame):
    """Ledger rows for one month, optionally narrowed to a wallet."""

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        wallet_service: WalletService,
        user_id: str,
        notify_refresh,
        currency_symbol: str = "Rp",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._tx_svc = tx_service
        self._wallet_svc = wallet_service
        self._user_id = user_id
        self._notify_refresh = notify_refresh
        self._symbol = currency_symbol
        self._month = current_month_str()
        self._wallet_var = ctk.StringVar(value=_ALL_WALLETS)
        self._wallets = []

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(side="left", padx=(8, 0), pady=6)
        self._mlabel = ctk.CTkLabel(
            bar, text="", width=130, anchor="center",
            font=ctk.CTkFont(size=13, weight="bold"),
        )
        self._mlabel.pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(side="left", padx=(0, 12))

        self._wallet_combo = ctk.CTkComboBox(
            bar, values=[_ALL_WALLETS], variable=self._wallet_var,
            width=160, state="readonly", command=lambda _: self._load(),
        )
        self._wallet_combo.pack(side="left", padx=4)

        ctk.CTkButton(bar, text="+ Transaction", width=110, command=self._open_form).pack(
            side="right", padx=8, pady=6
        )
        self._net_label = ctk.CTkLabel(bar, text="", font=ctk.CTkFont(size=13))
        self._net_label.pack(side="right", padx=12)

    def _prev_month(self):
        self._month = prev_month(self._month)
        self._load()

    def _next_month(self):
        self._month = next_month(self._month)
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        self._mlabel.configure(text=friendly_month(self._month))

        self._wallets = self._wallet_svc.get_active(self._user_id)
        self._wallet_combo.configure(values=[_ALL_WALLETS] + [w.name for w in self._wallets])
        selected = next((w for w in self._wallets if w.name == self._wallet_var.get()), None)
        if selected is None:
            self._wallet_var.set(_ALL_WALLETS)
            rows = self._tx_svc.get_for_user(self._user_id, self._month)
        else:
            rows = self._tx_svc.get_for_wallet(selected.id, self._month)

        net = sum(t.net for t in rows)
        self._net_label.configure(
            text=f"Net: {format_signed(net, self._symbol)}",
            text_color="#4CAF50" if net >= 0 else "#F44336",
        )

        if not rows:
            ctk.CTkLabel(
                self._scroll, text="No transactions in this month.", text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        names = self._wallet_svc.get_names({t.wallet_id for t in rows})
        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate([
            ("Date", 100), ("Description", 260), ("Category", 140),
            ("Wallet", 120), ("Amount", 130), ("", 60),
        ]):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        # Newest first
        for idx, tx in enumerate(reversed(rows)):
            self._add_row(idx + 1, tx, names.get(tx.wallet_id, "—"))

    def _add_row(self, idx, tx: Transaction, wallet_name: str):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        data = [
            (friendly_date(tx.date), 100),
            (tx.description, 260),
            (tx.category, 140),
            (wallet_name, 120),
        ]
        for i, (text, width) in enumerate(data):
            ctk.CTkLabel(row, text=text, width=width, anchor="w").grid(
                row=0, column=i, padx=4, pady=4
            )
        ctk.CTkLabel(
            row, text=format_signed(tx.net, self._symbol), width=130, anchor="e",
            text_color="#4CAF50" if tx.net >= 0 else "#F44336",
        ).grid(row=0, column=4, padx=4)
        ctk.CTkButton(
            row, text="✕", width=28, height=24,
            fg_color="transparent", text_color="#F44336",
            hover_color=("gray80", "gray30"),
            command=lambda: self._delete(tx, wallet_name),
        ).grid(row=0, column=5, padx=(4, 6))

    def _open_form(self):
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc, self._wallet_svc, self._user_id,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _delete(self, tx: Transaction, wallet_name: str):
        if tx.is_transfer:
            title = "Delete Transfer"
            message = "This is part of a transfer. Delete both sides of this transfer?"
        else:
            title = "Delete Transaction"
            message = "Delete this transaction? The wallet balance will change."
        dlg = ConfirmDialog(
            self.winfo_toplevel(), title, message,
            details=[
                ("Date", friendly_date(tx.date)),
                ("Description", tx.description or "—"),
                ("Wallet", wallet_name),
                ("Amount", format_signed(tx.net, self._symbol)),
            ],
            confirm_text="Delete", destructive=True,
        )
        if dlg.result:
            self._tx_svc.delete(tx.id)
            self._notify_refresh("transaction")
