import customtkinter as ctk


class ConfirmDialog(ctk.CTkToplevel):
    """Modal yes/no question with an optional label/value preview.

    Blocks until answered; read ``.result`` afterwards. Enter confirms,
    Escape cancels.
    """

    def __init__(
        self,
        master,
        title: str,
        message: str,
        details: list[tuple[str, str]] | None = None,
        confirm_text: str = "Confirm",
        destructive: bool = False,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self.title(title)
        self.result = False
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, wraplength=360, justify="left", padx=20, pady=16
        ).grid(row=0, column=0, sticky="ew")

        if details:
            grid = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=6)
            grid.grid(row=1, column=0, padx=20, pady=(0, 12), sticky="ew")
            grid.grid_columnconfigure(1, weight=1)
            for i, (label, value) in enumerate(details):
                ctk.CTkLabel(grid, text=f"{label}:", text_color=("gray40", "gray70")).grid(
                    row=i, column=0, padx=(10, 6), pady=2, sticky="e"
                )
                ctk.CTkLabel(grid, text=value, anchor="w").grid(
                    row=i, column=1, padx=(0, 10), pady=2, sticky="ew"
                )

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=2, column=0, pady=(0, 16), padx=20, sticky="e")
        ctk.CTkButton(
            buttons, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left", padx=(0, 8))
        danger = {"fg_color": "#F44336", "hover_color": "#D32F2F"} if destructive else {}
        ctk.CTkButton(
            buttons, text=confirm_text, width=90, command=self._on_confirm, **danger,
        ).pack(side="left")

        self.bind("<Return>", lambda _e: self._on_confirm())
        self.bind("<Escape>", lambda _e: self.destroy())

        self.transient(master)
        self.grab_set()
        self._center()
        self.wait_window()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")

    def _on_confirm(self):
        self.result = True
        self.destroy()
