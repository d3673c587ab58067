import logging
from typing import Optional

import requests

from logic.errors import error_message
from model.models import Case

logger = logging.getLogger(__name__)

LOADING = "loading"
LOADED = "loaded"
ERROR = "error"


class CaseDetailModel:
    """
    State behind the case detail screen.

    A failed fetch puts the whole view in ``error``. The status and note
    forms live inside ``loaded``: a failed submission only sets
    ``action_error`` and keeps the case on screen, a successful one clears
    its field and refetches the case.

    Only one submission runs at a time: the caller claims it on the UI
    thread before handing ``submit_status`` or ``submit_note`` to a worker,
    and releases it once the result is back on the UI thread.
    """

    def __init__(self, api, case_id):
        self.api = api
        self.case_id = case_id
        self.state = LOADING
        self.case: Optional[Case] = None
        self.error = ""
        self.action_error = ""
        self.status_input = ""
        self.note_input = ""
        self.submitting = False

    @property
    def not_found(self) -> bool:
        return self.state == LOADED and self.case is None

    @property
    def can_submit_status(self) -> bool:
        return not self.submitting and bool(self.status_input.strip())

    @property
    def can_submit_note(self) -> bool:
        return not self.submitting and bool(self.note_input.strip())

    def set_inputs(self, status: str, note: str) -> None:
        # the worker owns the inputs until the submission is released
        if not self.submitting:
            self.status_input = status
            self.note_input = note

    def claim_submit(self) -> bool:
        """Mark one submission as in flight. False if another one already is."""
        if self.submitting or self.state != LOADED:
            return False
        self.submitting = True
        return True

    def release_submit(self) -> None:
        self.submitting = False

    def load(self) -> None:
        self.state = LOADING
        self.error = ""
        try:
            response = self.api.get_case(self.case_id)
            record = response.json() if response.content else None
        except requests.RequestException as exc:
            logger.error("Failed to fetch case %s: %s", self.case_id, exc)
            self.error = error_message(exc, "Failed to fetch case details")
            self.state = ERROR
            return

        self.case = Case.from_record(record) if isinstance(record, dict) and record else None
        self.state = LOADED

    def submit_status(self) -> bool:
        status = self.status_input.strip()
        if not status:
            return False
        try:
            self.api.update_status(self.case_id, status)
        except requests.RequestException as exc:
            logger.error("Failed to update status of case %s: %s", self.case_id, exc)
            self.action_error = error_message(exc, "Failed to update status")
            return False

        self.status_input = ""
        self.action_error = ""
        self.load()
        return True

    def submit_note(self) -> bool:
        note = self.note_input.strip()
        if not note:
            return False
        try:
            self.api.add_progress_note(self.case_id, {"note": note})
        except requests.RequestException as exc:
            logger.error("Failed to add note to case %s: %s", self.case_id, exc)
            self.action_error = error_message(exc, "Failed to add note")
            return False

        self.note_input = ""
        self.action_error = ""
        self.load()
        return True
