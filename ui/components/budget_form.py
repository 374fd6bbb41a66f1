import customtkinter as ctk
from services.budget_service import BudgetService
from models.budget import Budget
from utils.currency import format_currency, parse_amount
from utils.date_helpers import friendly_month


class BudgetForm(ctk.CTkToplevel):
    """Add or edit the monthly limit of one spending category."""

    def __init__(
        self,
        master,
        budget_service: BudgetService,
        user_id: str,
        month: str,
        budget: Budget | None = None,
        currency_symbol: str = "Rp",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = budget_service
        self._user_id = user_id
        self._month = month
        self._budget = budget
        self.saved = False

        self.title("Edit Budget" if budget else "New Budget")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        cat_names = budget_service.get_budget_categories()

        r = 0
        ctk.CTkLabel(self, text="Category:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        current_cat = budget.category if budget else (cat_names[0] if cat_names else "")
        self._cat_var = ctk.StringVar(value=current_cat)
        # Free text is allowed so limits can follow custom transaction categories
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var,
            width=200, state="normal" if not budget else "disabled",
        ).grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")
        r += 1

        ctk.CTkLabel(self, text="Month:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        ctk.CTkLabel(self, text=friendly_month(month), anchor="w").grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        ctk.CTkLabel(self, text=f"Limit ({currency_symbol}):").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._limit_var = ctk.StringVar(
            value=format_currency(budget.limit_amount, "").strip() if budget else ""
        )
        ctk.CTkEntry(self, textvariable=self._limit_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
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
        if budget:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _on_save(self):
        try:
            limit = parse_amount(self._limit_var.get())
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        try:
            self._svc.upsert(self._user_id, self._cat_var.get(), self._month, limit)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        self._svc.delete(self._budget.id)
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
