import customtkinter as ctk
from services.transaction_service import TransactionService
from services.wallet_service import WalletService
from utils.constants import CATEGORIES, KIND_OUTCOME, LEDGER_KINDS
from utils.currency import parse_amount
from utils.date_helpers import today_str


class TransactionForm(ctk.CTkToplevel):
    """Add a manual entry (income, outcome, saving) or a wallet transfer."""

    _last_date: str = today_str()  # reset to today on each app launch

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        wallet_service: WalletService,
        user_id: str,
        transfer: bool = False,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._user_id = user_id
        self._transfer = transfer
        self.saved = False

        self.title("New Transfer" if transfer else "New Transaction")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._wallets = wallet_service.get_active(user_id)
        wallet_names = [w.name for w in self._wallets]

        if transfer:
            r = self._build_transfer_form(0, wallet_names)
        else:
            r = self._build_entry_form(0, wallet_names)
        self._build_footer(r)

        self.transient(master)
        self.grab_set()
        self._center()

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

    def _wallet_combo(self, label, row, names, default) -> ctk.StringVar:
        self._label(label, row)
        var = ctk.StringVar(value=default)
        ctk.CTkComboBox(
            self, values=names, variable=var, width=220, state="readonly"
        ).grid(row=row, column=1, padx=(0, 16), pady=4, sticky="ew")
        return var

    def _build_entry_form(self, r, wallet_names) -> int:
        self._label("Type:", r)
        self._kind_var = ctk.StringVar(value=KIND_OUTCOME)
        kind_frame = ctk.CTkFrame(self, fg_color="transparent")
        kind_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for kind in LEDGER_KINDS:
            ctk.CTkRadioButton(
                kind_frame, text=kind.title(),
                variable=self._kind_var, value=kind,
                command=self._on_kind_change,
            ).pack(side="left", padx=4)
        r += 1

        self._wallet_var = self._wallet_combo(
            "Wallet:", r, wallet_names, wallet_names[0] if wallet_names else ""
        )
        r += 1
        self._amount_var = self._entry("Amount:", r)
        r += 1
        self._date_var = self._entry("Date:", r, TransactionForm._last_date)
        r += 1

        self._label("Category:", r)
        cat_names = CATEGORIES[KIND_OUTCOME]
        self._cat_var = ctk.StringVar(value=cat_names[0])
        self._cat_combo = ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var, width=220,
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._desc_var = self._entry("Description:", r)
        return r + 1

    def _build_transfer_form(self, r, wallet_names) -> int:
        self._from_var = self._wallet_combo(
            "From Wallet:", r, wallet_names, wallet_names[0] if wallet_names else ""
        )
        r += 1
        self._to_var = self._wallet_combo(
            "To Wallet:", r, wallet_names, wallet_names[1] if len(wallet_names) > 1 else ""
        )
        r += 1
        self._amount_var = self._entry("Amount:", r)
        r += 1
        self._fee_var = self._entry("Admin Fee:", r, "0")
        r += 1
        self._date_var = self._entry("Date:", r, TransactionForm._last_date)
        r += 1
        self._desc_var = self._entry("Note:", r)
        return r + 1

    def _build_footer(self, r):
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
        ctk.CTkButton(
            btn_frame, text="Save Transfer" if self._transfer else "Save", width=110,
            command=self._on_save,
        ).pack(side="right")

    def _on_kind_change(self):
        cat_names = CATEGORIES.get(self._kind_var.get(), [])
        self._cat_combo.configure(values=cat_names)
        if cat_names:
            self._cat_var.set(cat_names[0])
            self._cat_combo.set(cat_names[0])

    def _wallet_id(self, name: str) -> int | None:
        wallet = next((w for w in self._wallets if w.name == name), None)
        return wallet.id if wallet else None

    def _on_save(self):
        try:
            amount = parse_amount(self._amount_var.get())
            fee = parse_amount(self._fee_var.get() or "0") if self._transfer else 0
        except ValueError:
            self._error_var.set("Invalid amount.")
            return

        date_str = self._date_var.get().strip()
        try:
            if self._transfer:
                from_id = self._wallet_id(self._from_var.get())
                to_id = self._wallet_id(self._to_var.get())
                if from_id is None or to_id is None:
                    self._error_var.set("Please select both wallets.")
                    return
                self._tx_svc.create_transfer(
                    self._user_id, from_id, to_id, amount, date_str,
                    note=self._desc_var.get(), admin_fee=fee,
                )
            else:
                wallet_id = self._wallet_id(self._wallet_var.get())
                if wallet_id is None:
                    self._error_var.set("Please select a wallet.")
                    return
                self._tx_svc.create_entry(
                    self._user_id, wallet_id, self._kind_var.get(), amount,
                    date_str, self._cat_var.get().strip(), self._desc_var.get(),
                )
        except ValueError as e:
            self._error_var.set(str(e))
            return
        TransactionForm._last_date = date_str
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
