import os
import tkinter as tk
from tkinter import ttk, filedialog

from logic.intake import ACCEPTED_EXTENSIONS, IntakeModel, REQUIRED_FIELDS
from model.models import NATURE_OF_CASE
from ui import theme

LABELS = {
    "sender_name": "Sender Name",
    "subject": "Subject",
    "country_of_origin": "Country of Origin",
    "distressed_person_name": "Distressed Person Name",
    "nature_of_case": "Nature of Case",
    "case_details": "Case Details",
}


def _default_initialdir() -> str:
    """Start the file picker in the user's Documents folder when there is one."""
    documents = os.path.join(os.path.expanduser("~"), "Documents")
    return documents if os.path.isdir(documents) else os.getcwd()


class IntakeFrame(tk.Frame):
    """New distress case form with supporting documents."""
    def __init__(self, parent, controller):
        super().__init__(parent)
        self.controller = controller
        self.model = None
        self._submitting = False
        theme.apply(self)

        root = ttk.Frame(self, style="App.TFrame")
        root.pack(fill="both", expand=True)

        top = ttk.Frame(root, style="Toolbar.TFrame", padding=(12, 10))
        top.pack(fill="x")
        ttk.Button(top, text="← Back", style="Ghost.TButton",
                   command=lambda: controller.navigate("/")).pack(side="left")
        ttk.Label(top, text="New Distress Case", style="H1.TLabel").pack(side="left", padx=(8, 0))

        outer = ttk.Frame(root, style="Card.TFrame", padding=16)
        outer.pack(fill="both", expand=True, padx=12, pady=(0, 12))

        self.error_label = ttk.Label(outer, text="", style="Error.TLabel", wraplength=900)
        self.error_label.pack(anchor="w")
        self.upload_error_label = ttk.Label(outer, text="", style="Error.TLabel", wraplength=900)
        self.upload_error_label.pack(anchor="w")

        form = ttk.Frame(outer, style="Card.TFrame")
        form.pack(fill="x", pady=(8, 0))
        form.grid_columnconfigure(0, weight=1)
        form.grid_columnconfigure(1, weight=1)

        # two-column grid of single-line fields
        self.vars = {}
        single_line = [f for f in REQUIRED_FIELDS if f not in ("nature_of_case", "case_details")]
        for i, name in enumerate(single_line):
            row, col = divmod(i, 2)
            ttk.Label(form, text=f"{LABELS[name]} *", style="Field.TLabel")\
                .grid(row=row * 2, column=col, sticky="w", pady=(8, 2), padx=(0, 8))
            var = tk.StringVar()
            ttk.Entry(form, textvariable=var).grid(row=row * 2 + 1, column=col, sticky="ew", padx=(0, 8))
            self.vars[name] = var

        base = len(single_line) + 1
        ttk.Label(form, text=f"{LABELS['nature_of_case']} *", style="Field.TLabel")\
            .grid(row=base, column=0, sticky="w", pady=(12, 2))
        self.vars["nature_of_case"] = tk.StringVar()
        ttk.Combobox(form, textvariable=self.vars["nature_of_case"], values=NATURE_OF_CASE,
                     state="readonly").grid(row=base + 1, column=0, columnspan=2, sticky="ew", padx=(0, 8))

        ttk.Label(form, text=f"{LABELS['case_details']} *", style="Field.TLabel")\
            .grid(row=base + 2, column=0, sticky="w", pady=(12, 2))
        self.details_text = tk.Text(form, height=5, wrap="word", bg=theme.FIELD_BG, fg=theme.FG,
                                    insertbackground=theme.FG, relief="flat")
        self.details_text.grid(row=base + 3, column=0, columnspan=2, sticky="ew", padx=(0, 8))

        # Supporting documents
        docs = ttk.Frame(outer, style="Card.TFrame")
        docs.pack(fill="x", pady=(16, 0))
        ttk.Label(docs, text="Supporting Documents", style="Section.TLabel").pack(anchor="w")
        picker = ttk.Frame(docs, style="Card.TFrame")
        picker.pack(fill="x", pady=(6, 0))
        ttk.Button(picker, text="Select Files", style="Ghost.TButton",
                   command=self._select_files).pack(side="left")
        self.files_label = ttk.Label(picker, text="", style="Sub.TLabel")
        self.files_label.pack(side="left", padx=(12, 0))

        self.submit_btn = ttk.Button(outer, text="Submit Case", style="Accent.TButton", command=self.submit)
        self.submit_btn.pack(fill="x", pady=(16, 0))

    # ---------- lifecycle ----------
    def on_show(self):
        # a fresh form every time; unsaved input from a previous visit is dropped
        self.model = IntakeModel(self.controller.api, self.controller.navigate)
        self._submitting = False
        for var in self.vars.values():
            var.set("")
        self.details_text.delete("1.0", "end")
        self.render()

    # ---------- rendering ----------
    def render(self):
        m = self.model
        self.error_label.config(text=m.error)
        self.upload_error_label.config(text=m.upload_error)
        count = len(m.files)
        self.files_label.config(text=f"{count} file(s) selected" if count else "")
        busy = m.busy or self._submitting
        label = m.submit_label if m.busy or not busy else "Submitting..."
        self.submit_btn.config(text=label, state="disabled" if busy else "normal")

    # ---------- actions ----------
    def _select_files(self):
        patterns = " ".join(f"*{ext}" for ext in ACCEPTED_EXTENSIONS)
        paths = filedialog.askopenfilenames(
            parent=self, title="Select supporting documents",
            initialdir=_default_initialdir(),
            filetypes=[("Documents and images", patterns)],
        )
        if paths:
            self.model.set_files(paths)
            self.render()

    def submit(self):
        m = self.model
        if m.busy or self._submitting:
            return
        for name, var in self.vars.items():
            m.set_field(name, var.get())
        m.set_field("case_details", self.details_text.get("1.0", "end-1c"))

        self._submitting = True
        self.controller.run_async(m.submit, lambda result, error: self._on_done(m))
        self._poll(m)

    def _poll(self, model):
        # reflect the creating/uploading phase on the button while the worker runs
        if model is not self.model:
            return
        self.render()
        if self._submitting:
            self.after(100, lambda: self._poll(model))

    def _on_done(self, model):
        if model is self.model:
            self._submitting = False
            self.render()
