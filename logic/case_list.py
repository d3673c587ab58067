import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

import requests

from logic.errors import error_message
from model.models import CaseRow, DashboardStats

logger = logging.getLogger(__name__)

PAGE_SIZE_OPTIONS = (10, 25, 50)

LOADING = "loading"
SUCCESS = "success"
ERROR = "error"


class CaseListModel:
    """
    State behind the dashboard table.

    loading -> success | error, driven by (page, page_size). Each change of
    either re-enters loading and fetches that page from the server; rows
    are never sliced client-side from a bigger result. Page changes made
    while a fetch is in flight are ignored.
    """

    def __init__(self, api, navigate: Callable[[str], None], page_size: int = PAGE_SIZE_OPTIONS[0]):
        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Unsupported page size: {page_size}")
        self.api = api
        self.navigate = navigate
        self.page = 1
        self.page_size = page_size
        self.state = LOADING
        self.rows: List[CaseRow] = []
        self.error = ""
        self.sort_column: Optional[str] = None
        self.sort_descending = False
        self.stats: Optional[DashboardStats] = None

    @property
    def is_empty(self) -> bool:
        return self.state == SUCCESS and not self.rows

    def load(self) -> None:
        self.state = LOADING
        self.error = ""
        try:
            response = self.api.list_cases(self.page, self.page_size)
            records = response.json()
            if records is None or records == "":
                raise ValueError("No data received from server")
            if not isinstance(records, list):
                raise ValueError("Unexpected response from server")
            rows = [CaseRow.from_record(r) for r in records]
        except requests.RequestException as exc:
            logger.error("Error fetching cases: %s", exc)
            self.error = error_message(exc, "Error fetching cases")
            self.rows = []
            self.state = ERROR
            return
        except ValueError as exc:
            logger.error("Error fetching cases: %s", exc)
            self.error = str(exc)
            self.rows = []
            self.state = ERROR
            return

        self.rows = rows[: self.page_size]
        self.sort_column = None
        self.sort_descending = False
        self.state = SUCCESS
        logger.debug("Loaded %d cases (page %d, size %d)", len(self.rows), self.page, self.page_size)

    # ---------- pagination ----------
    def set_page(self, page: int) -> bool:
        page = max(1, int(page))
        if page == self.page or self.state == LOADING:
            return False
        self.page = page
        self.load()
        return True

    def set_page_size(self, page_size: int) -> bool:
        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Unsupported page size: {page_size}")
        if page_size == self.page_size or self.state == LOADING:
            return False
        self.page_size = page_size
        self.load()
        return True

    def next_page(self) -> bool:
        return self.set_page(self.page + 1)

    def previous_page(self) -> bool:
        return self.set_page(self.page - 1)

    # ---------- table ----------
    def sort_by(self, column: str) -> None:
        """Sort the rows on screen; repeated calls on one column flip the order."""
        if column == self.sort_column:
            self.sort_descending = not self.sort_descending
        else:
            self.sort_column = column
            self.sort_descending = False
        if column == "receiving_date":
            # undated rows go last when ascending
            key = lambda r: (r.received_at is None, r.received_at or datetime.min.replace(tzinfo=timezone.utc))
        else:
            key = lambda r: str(getattr(r, column)).lower()
        self.rows.sort(key=key, reverse=self.sort_descending)

    def open_case(self, case_id) -> None:
        self.navigate(f"/cases/{case_id}")

    # ---------- dashboard ----------
    def load_stats(self) -> None:
        """Fetch the counts strip. A failure only hides the strip."""
        try:
            record = self.api.dashboard_stats().json()
            self.stats = DashboardStats.from_record(record) if isinstance(record, dict) else None
        except (requests.RequestException, ValueError, TypeError) as exc:
            logger.warning("Dashboard stats unavailable: %s", exc)
            self.stats = None
