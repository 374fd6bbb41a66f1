import customtkinter as ctk
from database.ledger_store import StoreError
from services.recurring_processor import ProcessResult, RecurringProcessor, TemplateError
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService
from services.wallet_service import WalletService
from ui.components.recurring_form import RecurringForm
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.process_result_dialog import ProcessResultDialog
from utils.constants import FREQUENCY_MONTHLY, KIND_TRANSFER
from utils.currency import format_currency
from utils.date_helpers import format_date, friendly_date, today_str


class RecurringTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        wallet_service: WalletService,
        processor: RecurringProcessor,
        tx_service: TransactionService,
        user_id: str,
        notify_refresh,
        currency_symbol: str = "Rp",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = recurring_service
        self._wallet_svc = wallet_service
        self._processor = processor
        self._tx_svc = tx_service
        self._user_id = user_id
        self._notify_refresh = notify_refresh
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Recurring Templates",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Template", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )
        ctk.CTkButton(
            bar, text="Run Due Now",
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._run_due,
        ).pack(side="right", padx=(8, 0), pady=6)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        templates = self._svc.get_all(self._user_id)
        if not templates:
            ctk.CTkLabel(
                self._scroll,
                text="No recurring templates yet. Click '+ Add Template' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        wallet_names = {w.id: w.name for w in self._wallet_svc.get_active(self._user_id)}

        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate([
            ("Description", 170), ("Type", 70), ("Amount", 110),
            ("Wallet", 170), ("Schedule", 90), ("Next Due", 100),
            ("Status", 70), ("Actions", 200),
        ]):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        for idx, template in enumerate(templates):
            self._add_row(idx + 1, template, wallet_names)

    def _add_row(self, idx, template, wallet_names):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        wallet_text = wallet_names.get(template.wallet_id, "—")
        if template.kind == KIND_TRANSFER:
            wallet_text += f" → {wallet_names.get(template.target_wallet_id, '—')}"
        if template.frequency == FREQUENCY_MONTHLY:
            schedule = f"Day {template.day_of_month}"
        else:
            schedule = template.frequency.title()
        next_due = self._svc.next_due_date(template)
        next_due_str = friendly_date(format_date(next_due)) if next_due else "—"

        data = [
            (template.description, 170),
            (template.kind.title(), 70),
            (format_currency(template.amount, self._symbol), 110),
            (wallet_text, 170),
            (schedule, 90),
            (next_due_str, 100),
        ]
        for i, (text, width) in enumerate(data):
            ctk.CTkLabel(row, text=text, width=width, anchor="w").grid(
                row=0, column=i, padx=4, pady=4
            )

        ctk.CTkLabel(
            row, text="Active" if template.is_active else "Paused", width=70, anchor="w",
            text_color="#4CAF50" if template.is_active else "gray60",
        ).grid(row=0, column=6, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=7, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Generate", width=64, height=24,
            command=lambda t=template: self._generate_now(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda t=template: self._open_edit(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Pause" if template.is_active else "Resume", width=52, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda t=template: self._toggle_active(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="✕", width=28, height=24,
            fg_color="transparent", text_color="#F44336",
            hover_color=("gray80", "gray30"),
            command=lambda t=template: self._delete(t),
        ).pack(side="left", padx=2)

    def _open_add(self):
        form = RecurringForm(
            self.winfo_toplevel(), self._svc, self._wallet_svc, self._user_id,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _open_edit(self, template):
        form = RecurringForm(
            self.winfo_toplevel(), self._svc, self._wallet_svc, self._user_id,
            template=template,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _toggle_active(self, template):
        self._svc.set_active(template.id, not template.is_active)
        self._notify_refresh("recurring")

    def _delete(self, template):
        generated = self._tx_svc.get_for_template(template.id)
        dlg = ConfirmDialog(
            self.winfo_toplevel(), "Delete Template",
            f"Delete '{template.description}'? Transactions it already "
            "generated stay in the ledger.",
            details=[
                ("Generated rows", str(len(generated))),
                ("Last run", friendly_date(generated[-1].date) if generated else "Never"),
            ],
            confirm_text="Delete", destructive=True,
        )
        if dlg.result:
            self._svc.delete(template.id)
            self._notify_refresh("recurring")

    def _generate_now(self, template):
        names = {w.id: w.name for w in self._wallet_svc.get_active(self._user_id)}
        wallet = names.get(template.wallet_id, "—")
        if template.kind == KIND_TRANSFER:
            wallet += f" → {names.get(template.target_wallet_id, '—')}"
        dlg = ConfirmDialog(
            self.winfo_toplevel(), "Generate Now",
            f"Create the transaction for '{template.description}' now? "
            "This ignores the schedule.",
            details=[
                ("Amount", format_currency(template.amount, self._symbol)),
                ("Wallet", wallet),
                ("Date", friendly_date(today_str())),
            ],
            confirm_text="Generate",
        )
        if dlg.result:
            self._show_result(self._processor.generate_now(template.id))

    def _run_due(self):
        try:
            result = self._processor.process_due_templates(self._user_id)
        except StoreError as e:
            result = ProcessResult(
                errors=[TemplateError(template="Recurring templates", error=str(e))]
            )
        self._show_result(result)

    def _show_result(self, result: ProcessResult):
        self._notify_refresh("transaction" if result.transactions else "recurring")
        ProcessResultDialog(self.winfo_toplevel(), result)
