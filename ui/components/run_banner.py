import customtkinter as ctk
from services.recurring_processor import ProcessResult

_INFO_COLOR = "#2196F3"
_WARN_COLOR = "#FF9800"


class RunBanner(ctk.CTkFrame):
    """Strip above the tabs announcing what a recurring run added.

    Turns orange when some templates failed and offers the detail dialog.
    Removes itself after `timeout_ms` unless that is None.
    """

    def __init__(self, master, result: ProcessResult, on_view=None, on_details=None,
                 timeout_ms: int | None = 10000, **kwargs):
        color = _WARN_COLOR if result.has_errors else _INFO_COLOR
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        text = result.summary()
        if result.transactions:
            text += f" {len(result.transactions)} transaction(s) were added automatically."
        ctk.CTkLabel(
            self, text=text, text_color="white", anchor="w", padx=10, pady=6
        ).grid(row=0, column=0, sticky="ew")

        actions = ctk.CTkFrame(self, fg_color="transparent")
        actions.grid(row=0, column=1, padx=(0, 4))
        for label, command in (("Details", on_details if result.has_errors else None),
                               ("View", on_view)):
            if command is None:
                continue
            ctk.CTkButton(
                actions, text=label, width=64, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=command,
            ).pack(side="left", padx=2)
        ctk.CTkButton(
            actions, text="✕", width=28, height=24,
            fg_color="transparent", text_color="white", command=self.destroy,
        ).pack(side="left")

        if timeout_ms:
            self.after(timeout_ms, self._expire)

    def _expire(self):
        if self.winfo_exists():
            self.destroy()
