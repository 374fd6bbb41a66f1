import customtkinter as ctk
from services.recurring_processor import ProcessResult

_OK_COLOR = "#4CAF50"
_ERROR_COLOR = "#F44336"


class ProcessResultDialog(ctk.CTkToplevel):
    """Modal summary of a recurring run: generated templates and failures."""

    def __init__(self, master, result: ProcessResult, title: str = "Recurring Transactions", **kwargs):
        super().__init__(master, **kwargs)
        self.title(title)
        self.geometry("520x380")
        self.resizable(False, True)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(
            self,
            text=result.summary(),
            font=ctk.CTkFont(size=16, weight="bold"),
            pady=12,
        ).grid(row=0, column=0, sticky="ew", padx=16)

        scroll = ctk.CTkScrollableFrame(self)
        scroll.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 8))
        scroll.grid_columnconfigure(0, weight=1)

        row = 0
        for name in result.processed:
            self._add_row(scroll, row, "✓", _OK_COLOR, name, "")
            row += 1
        for err in result.errors:
            self._add_row(scroll, row, "❗", _ERROR_COLOR, err.template, err.error)
            row += 1

        ctk.CTkButton(self, text="OK", command=self.destroy).grid(
            row=2, column=0, pady=(0, 16), padx=60, sticky="ew"
        )

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_row(self, parent, index: int, icon: str, color: str, title: str, detail: str):
        row_frame = ctk.CTkFrame(parent, fg_color=("gray90", "gray20"), corner_radius=6)
        row_frame.grid(row=index, column=0, sticky="ew", pady=3, padx=2)
        row_frame.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row_frame, text=icon, text_color=color,
            font=ctk.CTkFont(size=18), width=30,
        ).grid(row=0, column=0, rowspan=2, padx=(8, 4), pady=6)

        ctk.CTkLabel(
            row_frame, text=title,
            font=ctk.CTkFont(size=13, weight="bold"),
            text_color=color, anchor="w",
        ).grid(row=0, column=1, sticky="ew", padx=(0, 8), pady=(6, 0 if detail else 6))

        if detail:
            ctk.CTkLabel(
                row_frame, text=detail,
                font=ctk.CTkFont(size=11),
                text_color=("gray40", "gray70"),
                anchor="w", wraplength=380,
            ).grid(row=1, column=1, sticky="ew", padx=(0, 8), pady=(0, 6))

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
