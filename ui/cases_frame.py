import tkinter as tk
from tkinter import ttk

from logic.case_list import CaseListModel, ERROR, LOADING, PAGE_SIZE_OPTIONS
from ui import theme

COLUMNS = ("reference_number", "sender_name", "receiving_date", "subject", "status", "stage")
HEADERS = {
    "reference_number": "Reference Number",
    "sender_name": "Sender Name",
    "receiving_date": "Date Received",
    "subject": "Subject",
    "status": "Status",
    "stage": "Stage",
}
WIDTHS = {
    "reference_number": 160, "sender_name": 180, "receiving_date": 170,
    "subject": 260, "status": 120, "stage": 180,
}


class CasesFrame(tk.Frame):
    """Distress cases dashboard: server-paginated table, sortable columns."""
    def __init__(self, parent, controller):
        super().__init__(parent)
        self.controller = controller
        self.model = None
        self._loading = False
        self._row_ids = {}
        theme.apply(self)

        root = ttk.Frame(self, style="App.TFrame")
        root.pack(fill="both", expand=True)

        # Top bar: title + actions
        topbar = ttk.Frame(root, style="Toolbar.TFrame", padding=(16, 12))
        topbar.pack(fill="x")
        ttk.Label(topbar, text="Distress Cases Dashboard", style="H1.TLabel").pack(side="left")
        ttk.Button(topbar, text="Log out", style="Ghost.TButton",
                   command=self.controller.api.logout).pack(side="right", padx=(6, 0))
        ttk.Button(topbar, text="New Case", style="Accent.TButton",
                   command=lambda: self.controller.navigate("/cases/new")).pack(side="right")

        # counts strip; hidden when the stats call fails
        self.stats_label = ttk.Label(root, text="", style="Muted.TLabel", padding=(16, 0))
        self.stats_label.pack(fill="x")

        # Table card
        self.card = ttk.Frame(root, style="Card.TFrame", padding=12)
        self.card.pack(fill="both", expand=True, padx=16, pady=12)

        self.message = ttk.Label(self.card, text="", style="Card.TLabel")

        self.table = ttk.Frame(self.card, style="Card.TFrame")
        self.tree = ttk.Treeview(self.table, columns=COLUMNS, show="headings", selectmode="browse")
        for col in COLUMNS:
            self.tree.heading(col, text=HEADERS[col], command=lambda c=col: self._sort(c))
            self.tree.column(col, stretch=True, width=WIDTHS[col])
        self.tree.tag_configure("evenrow", background=theme.ROW_EVEN)
        self.tree.tag_configure("oddrow", background=theme.ROW_ODD)
        yscroll = ttk.Scrollbar(self.table, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=yscroll.set)
        self.tree.pack(side="left", fill="both", expand=True)
        yscroll.pack(side="right", fill="y")

        # Pager
        pager = ttk.Frame(root, style="Toolbar.TFrame", padding=(16, 0, 16, 12))
        pager.pack(fill="x")
        ttk.Label(pager, text="Rows per page", style="Muted.TLabel").pack(side="left")
        self.page_size_var = tk.StringVar(value=str(PAGE_SIZE_OPTIONS[0]))
        self.size_box = ttk.Combobox(pager, textvariable=self.page_size_var, width=5, state="readonly",
                                     values=[str(n) for n in PAGE_SIZE_OPTIONS])
        self.size_box.pack(side="left", padx=(8, 16))
        self.size_box.bind("<<ComboboxSelected>>", lambda e: self._change_page_size())

        self.next_btn = ttk.Button(pager, text="Next →", style="Ghost.TButton",
                                   command=lambda: self._fetch(self.model.next_page))
        self.next_btn.pack(side="right")
        self.page_label = ttk.Label(pager, text="Page 1", style="Muted.TLabel")
        self.page_label.pack(side="right", padx=8)
        self.prev_btn = ttk.Button(pager, text="← Prev", style="Ghost.TButton",
                                   command=lambda: self._fetch(self.model.previous_page))
        self.prev_btn.pack(side="right")

        # bindings
        self.tree.bind("<ButtonRelease-1>", self._on_click)
        self.tree.bind("<Return>", lambda e: self._open_selected())

    # ---------- lifecycle ----------
    def on_show(self):
        self.model = CaseListModel(self.controller.api, self.controller.navigate,
                                   page_size=int(self.page_size_var.get()))
        self.stats_label.config(text="")
        self._fetch(self.model.load)
        model = self.model
        self.controller.run_async(model.load_stats, lambda result, error: self._on_stats(model))

    def _fetch(self, action):
        model = self.model
        self._loading = True
        self._render_loading()
        self.controller.run_async(action, lambda result, error: self._on_loaded(model))

    def _on_loaded(self, model):
        # a newer model replaced this one while the request was in flight
        if model is self.model:
            self._loading = False
            self.render()

    def _on_stats(self, model):
        if model is self.model:
            self.stats_label.config(text=model.stats.summary if model.stats else "")

    # ---------- rendering ----------
    def _render_loading(self):
        self.table.pack_forget()
        self.message.config(text="Loading cases...", style="Card.TLabel")
        self.message.pack(fill="both", expand=True)
        self.prev_btn.config(state="disabled")
        self.next_btn.config(state="disabled")
        self.size_box.config(state="disabled")

    def render(self):
        m = self.model
        self.page_label.config(text=f"Page {m.page}")
        self.size_box.config(state="readonly")
        self.prev_btn.config(state="normal" if m.page > 1 else "disabled")
        self.next_btn.config(state="normal" if len(m.rows) >= m.page_size else "disabled")

        if m.state == LOADING:
            self._render_loading()
            return
        if m.state == ERROR:
            self.table.pack_forget()
            self.message.config(text=m.error, style="Error.TLabel")
            self.message.pack(fill="x")
            return
        if m.is_empty:
            self.table.pack_forget()
            self.message.config(text="No cases found", style="Card.TLabel")
            self.message.pack(fill="both", expand=True)
            return

        self.message.pack_forget()
        self.table.pack(fill="both", expand=True)
        self.tree.delete(*self.tree.get_children())
        # Treeview assigns the item ids; server ids are not guaranteed unique or present
        self._row_ids = {}
        for i, row in enumerate(m.rows):
            tag = "evenrow" if i % 2 == 0 else "oddrow"
            values = [getattr(row, col) or "N/A" for col in COLUMNS]
            item = self.tree.insert("", "end", values=values, tags=(tag,))
            if row.id is not None:
                self._row_ids[item] = row.id

    # ---------- actions ----------
    def _change_page_size(self):
        size = int(self.page_size_var.get())
        if self._loading:
            self.page_size_var.set(str(self.model.page_size))
            return
        if size != self.model.page_size:
            self._fetch(lambda: self.model.set_page_size(size))

    def _sort(self, column):
        if self.model is not None and self.model.rows:
            self.model.sort_by(column)
            self.render()

    def _open_selected(self):
        sel = self.tree.selection()
        if sel and sel[0] in self._row_ids:
            self.model.open_case(self._row_ids[sel[0]])

    def _on_click(self, event):
        item = self.tree.identify_row(event.y)
        if item in self._row_ids:
            self.model.open_case(self._row_ids[item])
