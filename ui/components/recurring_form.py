import customtkinter as ctk
from services.recurring_service import RecurringService
from services.wallet_service import WalletService
from models.recurring_template import RecurringTemplate
from utils.constants import (
    CATEGORIES, FREQUENCIES, FREQUENCY_MONTHLY, KIND_OUTCOME, KIND_TRANSFER,
    TEMPLATE_KINDS,
)
from utils.currency import parse_amount


class RecurringForm(ctk.CTkToplevel):
    """Add or edit a recurring template."""

    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        wallet_service: WalletService,
        user_id: str,
        template: RecurringTemplate | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = recurring_service
        self._user_id = user_id
        self._template = template
        self.saved = False

        self.title("Edit Recurring Template" if template else "New Recurring Template")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._wallets = wallet_service.get_active(user_id)
        wallet_names = [w.name for w in self._wallets]
        names_by_id = {w.id: w.name for w in self._wallets}

        r = 0

        self._add_label("Description:", r)
        self._desc_var = ctk.StringVar(value=template.description if template else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Type:", r)
        self._kind_var = ctk.StringVar(value=template.kind if template else KIND_OUTCOME)
        kind_frame = ctk.CTkFrame(self, fg_color="transparent")
        kind_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for kind in TEMPLATE_KINDS:
            ctk.CTkRadioButton(
                kind_frame, text=kind.title(),
                variable=self._kind_var, value=kind,
                command=self._on_kind_change,
            ).pack(side="left", padx=4)
        r += 1

        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=str(template.amount) if template else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Category:", r)
        init_kind = self._kind_var.get()
        cat_names = CATEGORIES.get(init_kind, [])
        self._cat_var = ctk.StringVar(
            value=template.category if template else (cat_names[0] if cat_names else "")
        )
        self._cat_combo = ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var, width=240,
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Wallet:", r)
        current_wallet = ""
        if template:
            current_wallet = names_by_id.get(template.wallet_id, "")
        elif wallet_names:
            current_wallet = wallet_names[0]
        self._wallet_var = ctk.StringVar(value=current_wallet)
        ctk.CTkComboBox(
            self, values=wallet_names,
            variable=self._wallet_var, width=240, state="readonly"
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._target_label = ctk.CTkLabel(self, text="Target Wallet:")
        self._target_label.grid(row=r, column=0, padx=(16, 8), pady=4, sticky="e")
        target_name = ""
        if template and template.target_wallet_id is not None:
            target_name = names_by_id.get(template.target_wallet_id, "")
        self._target_var = ctk.StringVar(value=target_name)
        self._target_combo = ctk.CTkComboBox(
            self, values=wallet_names,
            variable=self._target_var, width=240, state="readonly"
        )
        self._target_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Frequency:", r)
        self._freq_var = ctk.StringVar(
            value=template.frequency if template else FREQUENCY_MONTHLY
        )
        ctk.CTkComboBox(
            self, values=FREQUENCIES, variable=self._freq_var,
            width=240, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Day of Month:", r)
        self._dom_var = ctk.StringVar(value=str(template.day_of_month) if template else "1")
        ctk.CTkComboBox(
            self, values=[str(i) for i in range(1, 32)],
            variable=self._dom_var, width=80, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w"
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

        self._refresh_target_field()

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _on_kind_change(self):
        cat_names = CATEGORIES.get(self._kind_var.get(), [])
        self._cat_combo.configure(values=cat_names)
        if cat_names:
            self._cat_var.set(cat_names[0])
            self._cat_combo.set(cat_names[0])
        self._refresh_target_field()

    def _refresh_target_field(self):
        state = "readonly" if self._kind_var.get() == KIND_TRANSFER else "disabled"
        self._target_combo.configure(state=state)

    def _wallet_id(self, name: str) -> int | None:
        wallet = next((w for w in self._wallets if w.name == name), None)
        return wallet.id if wallet else None

    def _on_save(self):
        kind = self._kind_var.get()
        try:
            amount = parse_amount(self._amount_var.get())
        except ValueError:
            self._error_var.set("Invalid amount.")
            return

        wallet_id = self._wallet_id(self._wallet_var.get())
        if wallet_id is None:
            self._error_var.set("Please select a wallet.")
            return
        target_id = self._wallet_id(self._target_var.get()) if kind == KIND_TRANSFER else None

        fields = dict(
            description=self._desc_var.get(),
            amount=amount,
            kind=kind,
            category=self._cat_var.get().strip(),
            wallet_id=wallet_id,
            frequency=self._freq_var.get(),
            day_of_month=int(self._dom_var.get()),
            target_wallet_id=target_id,
        )
        try:
            if self._template:
                self._svc.update(
                    self._template.id, is_active=self._template.is_active, **fields
                )
            else:
                self._svc.create(self._user_id, **fields)
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
