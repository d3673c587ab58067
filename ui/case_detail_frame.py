import tkinter as tk
from tkinter import ttk

from logic.case_detail import CaseDetailModel, ERROR, LOADING
from ui import theme


class CaseDetailFrame(tk.Frame):
    """
    One case: header fields, status update, progress notes.
      • Fetches on every show, refetches after each successful submit
      • Submit buttons stay disabled while their field is blank or a submit is in flight
      • A failed fetch replaces the content; a failed submit shows above it
    """
    def __init__(self, parent, controller):
        super().__init__(parent)
        self.controller = controller
        self.model = None
        theme.apply(self)

        root = ttk.Frame(self, style="App.TFrame")
        root.pack(fill="both", expand=True)

        top = ttk.Frame(root, style="Toolbar.TFrame", padding=(12, 10))
        top.pack(fill="x")
        ttk.Button(top, text="← Back", style="Ghost.TButton",
                   command=lambda: controller.navigate("/")).pack(side="left")
        ttk.Label(top, text="Case Details", style="H1.TLabel").pack(side="left", padx=(8, 0))

        self.card = ttk.Frame(root, style="Card.TFrame", padding=16)
        self.card.pack(fill="both", expand=True, padx=12, pady=(0, 12))

        # state banner (loading / error / not found)
        self.banner = ttk.Label(self.card, text="", style="Card.TLabel", wraplength=900)

        # ---------- loaded content ----------
        self.content = ttk.Frame(self.card, style="Card.TFrame")

        self.action_error = ttk.Label(self.content, text="", style="Error.TLabel", wraplength=900)

        self.header = header = ttk.Frame(self.content, style="Card.TFrame")
        header.pack(fill="x")
        self.reference_label = ttk.Label(header, text="", style="Sub.TLabel")
        self.reference_label.pack(anchor="w")
        self.status_label = ttk.Label(header, text="", style="Sub.TLabel")
        self.status_label.pack(anchor="w")
        self.stage_label = ttk.Label(header, text="", style="Sub.TLabel")
        self.stage_label.pack(anchor="w")
        self.description_label = ttk.Label(header, text="", style="Card.TLabel", wraplength=900, justify="left")
        self.description_label.pack(anchor="w", pady=(10, 0))

        ttk.Separator(self.content).pack(fill="x", pady=12)

        # Status update form
        ttk.Label(self.content, text="Update Status", style="Section.TLabel").pack(anchor="w")
        status_row = ttk.Frame(self.content, style="Card.TFrame")
        status_row.pack(fill="x", pady=(6, 16))
        self.status_var = tk.StringVar()
        status_entry = ttk.Entry(status_row, textvariable=self.status_var)
        status_entry.pack(side="left", fill="x", expand=True)
        self.status_btn = ttk.Button(status_row, text="Update", style="Accent.TButton",
                                     command=self.submit_status)
        self.status_btn.pack(side="left", padx=(8, 0))
        status_entry.bind("<Return>", lambda e: self.submit_status())

        # Progress notes
        ttk.Label(self.content, text="Progress Notes", style="Section.TLabel").pack(anchor="w")
        note_row = ttk.Frame(self.content, style="Card.TFrame")
        note_row.pack(fill="x", pady=(6, 8))
        self.note_var = tk.StringVar()
        note_entry = ttk.Entry(note_row, textvariable=self.note_var)
        note_entry.pack(side="left", fill="x", expand=True)
        self.note_btn = ttk.Button(note_row, text="Add", style="Accent.TButton",
                                   command=self.submit_note)
        self.note_btn.pack(side="left", padx=(8, 0))
        note_entry.bind("<Return>", lambda e: self.submit_note())

        self.notes_list = tk.Listbox(self.content, height=10, activestyle="none",
                                     bg=theme.FIELD_BG, fg=theme.FG, highlightthickness=0,
                                     selectbackground=theme.BORDER, selectforeground=theme.FG)
        self.notes_list.pack(fill="both", expand=True)

        self.status_var.trace_add("write", lambda *_: self._sync_inputs())
        self.note_var.trace_add("write", lambda *_: self._sync_inputs())

    # ---------- lifecycle ----------
    def on_show(self, case_id=None):
        self.model = CaseDetailModel(self.controller.api, case_id)
        self.status_var.set("")
        self.note_var.set("")
        self._run(self.model.load)

    def _run(self, action):
        model = self.model
        if action == model.load:
            self._show_banner("Loading...", "Card.TLabel")
        else:
            self.status_btn.config(state="disabled")
            self.note_btn.config(state="disabled")
        self.controller.run_async(action, lambda result, error: self._on_done(model))

    def _on_done(self, model):
        if model is self.model:
            model.release_submit()
            self.render()

    # ---------- rendering ----------
    def _show_banner(self, text, style):
        self.content.pack_forget()
        self.banner.config(text=text, style=style)
        self.banner.pack(anchor="w")

    def render(self):
        m = self.model
        # inputs are cleared by the model on success, kept on failure;
        # read both first since each set() syncs the other back into the model
        status_text, note_text = m.status_input, m.note_input
        self.status_var.set(status_text)
        self.note_var.set(note_text)

        if m.state == LOADING:
            self._show_banner("Loading...", "Card.TLabel")
            return
        if m.state == ERROR:
            self._show_banner(m.error, "Error.TLabel")
            return
        if m.not_found:
            self._show_banner("Case not found", "Info.TLabel")
            return

        self.banner.pack_forget()
        self.content.pack(fill="both", expand=True)

        if m.action_error:
            self.action_error.config(text=m.action_error)
            self.action_error.pack(anchor="w", pady=(0, 8), before=self.header)
        else:
            self.action_error.pack_forget()

        c = m.case
        self.reference_label.config(text=f"Reference Number: {c.reference_number}")
        self.status_label.config(text=f"Status: {c.status}")
        self.stage_label.config(text=f"Stage: {c.stage}")
        self.description_label.config(text=c.case_details)

        self.notes_list.delete(0, "end")
        for note in c.progress_notes:
            self.notes_list.insert("end", f"{note.created_display}  ·  {note.note}")
        self._sync_inputs()

    def _sync_inputs(self):
        if self.model is None:
            return
        self.model.set_inputs(self.status_var.get(), self.note_var.get())
        self.status_btn.config(state="normal" if self.model.can_submit_status else "disabled")
        self.note_btn.config(state="normal" if self.model.can_submit_note else "disabled")

    # ---------- actions ----------
    def submit_status(self):
        self._sync_inputs()
        if self.model.can_submit_status and self.model.claim_submit():
            self._run(self.model.submit_status)

    def submit_note(self):
        self._sync_inputs()
        if self.model.can_submit_note and self.model.claim_submit():
            self._run(self.model.submit_note)
