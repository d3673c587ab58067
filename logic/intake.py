import logging
import os
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

import requests

from logic.errors import error_message
from model.models import DEFAULT_STAGE, DEFAULT_STATUS, NATURE_OF_CASE

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "sender_name",
    "subject",
    "country_of_origin",
    "distressed_person_name",
    "nature_of_case",
    "case_details",
)

# file picker filter only; the server does its own content-type check
ACCEPTED_EXTENSIONS = (".pdf", ".doc", ".docx", ".xls", ".xlsx", ".jpg", ".jpeg", ".png", ".gif")

UPLOAD_ERROR = "Error uploading files. Please try again."

IDLE = "idle"
CREATING = "creating"
UPLOADING = "uploading"


class IntakeModel:
    """
    New distress case form.

    Submitting creates the case, then uploads the selected files one at a
    time in selection order. The first failed upload stops the rest; the
    case that was already created stays on the server.
    """

    def __init__(self, api, navigate: Callable[[str], None], now: Optional[datetime] = None):
        self.api = api
        self.navigate = navigate
        self.fields: Dict[str, str] = {name: "" for name in REQUIRED_FIELDS}
        self.receiving_date = (now or datetime.now(timezone.utc)).isoformat()
        self.files: List[str] = []
        self.phase = IDLE
        self.upload_progress: Tuple[int, int] = (0, 0)
        self.error = ""
        self.upload_error = ""

    # ---------- form state ----------
    def set_field(self, name: str, value: str) -> None:
        if name not in self.fields:
            raise KeyError(name)
        self.fields[name] = value

    def set_files(self, paths) -> None:
        self.files = list(paths)

    def missing_fields(self) -> List[str]:
        missing = [name for name in REQUIRED_FIELDS if not self.fields[name].strip()]
        if "nature_of_case" not in missing and self.fields["nature_of_case"] not in NATURE_OF_CASE:
            missing.append("nature_of_case")
        return missing

    @property
    def busy(self) -> bool:
        return self.phase != IDLE

    @property
    def submit_label(self) -> str:
        if self.phase == CREATING:
            return "Creating case..."
        if self.phase == UPLOADING:
            done, total = self.upload_progress
            return f"Uploading documents ({done}/{total})..."
        return "Submit Case"

    # ---------- submission ----------
    def submit(self) -> bool:
        self.error = ""
        self.upload_error = ""
        if self.missing_fields():
            self.error = "Please fill in all required fields"
            return False

        self.phase = CREATING
        try:
            try:
                response = self.api.create_case(self._payload())
                case_id = response.json()["id"]
            except (requests.RequestException, KeyError, TypeError) as exc:
                logger.error("Error creating case: %s", exc)
                self.error = error_message(exc, "Error creating case")
                return False
            logger.info("Created case %s", case_id)

            if self.files:
                try:
                    self._upload_files(case_id)
                except (requests.RequestException, OSError) as exc:
                    self.error = error_message(exc, "Error creating case")
                    return False
        finally:
            self.phase = IDLE

        self.navigate(f"/cases/{case_id}")
        return True

    def _payload(self) -> Dict[str, str]:
        payload = {name: self.fields[name].strip() for name in REQUIRED_FIELDS}
        payload["receiving_date"] = self.receiving_date
        payload["status"] = DEFAULT_STATUS
        payload["stage"] = DEFAULT_STAGE
        return payload

    def _upload_files(self, case_id) -> None:
        self.phase = UPLOADING
        total = len(self.files)
        self.upload_progress = (0, total)
        for index, path in enumerate(self.files):
            try:
                self.api.upload_document(case_id, path)
            except (requests.RequestException, OSError):
                logger.exception("Error uploading %s to case %s", os.path.basename(path), case_id)
                self.upload_error = UPLOAD_ERROR
                raise
            self.upload_progress = (index + 1, total)
