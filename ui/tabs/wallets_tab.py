import customtkinter as ctk
from services.transaction_service import TransactionService
from services.wallet_service import WalletService
from ui.components.transaction_form import TransactionForm
from utils.constants import WALLET_TYPES
from utils.currency import format_currency, format_signed, parse_amount
from utils.date_helpers import current_month_str


class WalletsTab(ctk.CTkFrame):
    """Active wallets with their ledger-derived balances."""

    def __init__(
        self,
        master,
        wallet_service: WalletService,
        tx_service: TransactionService,
        user_id: str,
        notify_refresh,
        currency_symbol: str = "Rp",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = wallet_service
        self._tx_svc = tx_service
        self._user_id = user_id
        self._notify_refresh = notify_refresh
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_add_row()
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Wallets", font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        self._total_label = ctk.CTkLabel(bar, text="", font=ctk.CTkFont(size=13))
        self._total_label.pack(side="right", padx=12, pady=8)
        ctk.CTkButton(
            bar, text="Transfer", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._open_form(transfer=True),
        ).pack(side="right", padx=(8, 0), pady=6)
        ctk.CTkButton(
            bar, text="+ Transaction", width=110,
            command=self._open_form,
        ).pack(side="right", padx=(8, 0), pady=6)

    def _build_add_row(self):
        frame = ctk.CTkFrame(self, fg_color="transparent")
        frame.grid(row=1, column=0, sticky="ew", padx=8, pady=(8, 0))
        self._name_var = ctk.StringVar()
        self._type_var = ctk.StringVar(value=WALLET_TYPES[0])
        self._initial_var = ctk.StringVar(value="0")
        self._error_var = ctk.StringVar()
        ctk.CTkEntry(frame, textvariable=self._name_var, width=180,
                     placeholder_text="Wallet name").pack(side="left", padx=(0, 4))
        ctk.CTkComboBox(frame, values=WALLET_TYPES, variable=self._type_var,
                        width=110, state="readonly").pack(side="left", padx=4)
        ctk.CTkEntry(frame, textvariable=self._initial_var, width=120).pack(side="left", padx=4)
        ctk.CTkButton(frame, text="+ Add Wallet", width=100,
                      command=self._on_add).pack(side="left", padx=4)
        ctk.CTkLabel(frame, textvariable=self._error_var,
                     text_color="#F44336").pack(side="left", padx=8)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        wallets = self._svc.get_active(self._user_id)
        month = current_month_str()
        total = self._svc.get_total_balance(self._user_id)
        self._total_label.configure(text=f"Total: {format_currency(total, self._symbol)}")

        for idx, wallet in enumerate(wallets):
            bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
            row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
            row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
            row.grid_columnconfigure(0, weight=1)
            ctk.CTkLabel(row, text=wallet.name, anchor="w").grid(
                row=0, column=0, padx=8, pady=4, sticky="ew"
            )
            ctk.CTkLabel(row, text=wallet.type_label, width=90, anchor="w",
                         text_color="gray60").grid(row=0, column=1, padx=4)
            month_net = self._tx_svc.get_totals(wallet.id, month)["net"]
            ctk.CTkLabel(
                row, text=f"This month: {format_signed(month_net, self._symbol)}",
                width=170, anchor="e", text_color="gray60",
            ).grid(row=0, column=2, padx=4)
            color = "#4CAF50" if wallet.current_balance >= 0 else "#F44336"
            ctk.CTkLabel(
                row, text=format_currency(wallet.current_balance, self._symbol),
                width=140, anchor="e", text_color=color,
            ).grid(row=0, column=3, padx=8)

    def _open_form(self, transfer: bool = False):
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc, self._svc, self._user_id,
            transfer=transfer,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _on_add(self):
        try:
            initial = parse_amount(self._initial_var.get() or "0")
            self._svc.create(self._user_id, self._name_var.get(),
                             self._type_var.get(), initial)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self._error_var.set("")
        self._name_var.set("")
        self._initial_var.set("0")
        self._notify_refresh("wallet")
