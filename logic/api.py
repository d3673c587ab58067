import logging
import mimetypes
import os
from typing import Any, Callable, Dict, Optional

import requests

from logic.session import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT = 30.0
LOGIN_ROUTE = "/login"


class ApiClient:
    """
    Thin verb+path wrapper over the case-intake REST backend.

    Every call returns the raw ``requests.Response`` or raises the
    underlying ``requests`` exception; callers read the payload and turn
    errors into messages themselves. The only thing handled here is the
    session: the stored token is attached to each request, and a 401 from
    any endpoint clears it and sends the user back to the login screen.
    """

    def __init__(
        self,
        session: TokenStore,
        navigate: Callable[[str], None],
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.session = session
        self.navigate = navigate
        self.base_url = (base_url or os.getenv("DISTRESS_API_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout or float(os.getenv("DISTRESS_API_TIMEOUT") or DEFAULT_TIMEOUT)

        # requests.Session keeps cookies between calls (credential passthrough)
        self.http = http or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        token = self.session.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        kwargs.setdefault("timeout", self.timeout)

        logger.debug("%s %s", method, path)
        response = self.http.request(method, self.base_url + path, headers=headers, **kwargs)
        try:
            response.raise_for_status()
        except requests.HTTPError:
            if response.status_code == 401:
                logger.warning("Session rejected on %s %s, signing out", method, path)
                self.session.clear()
                self.navigate(LOGIN_ROUTE)
            raise
        return response

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def login(self, credentials: Dict[str, Any]) -> requests.Response:
        response = self._request("POST", "/auth/login", json=credentials)
        token = _json_or_empty(response).get("token")
        if token:
            self.session.set(token)
        return response

    def register(self, user_data: Dict[str, Any]) -> requests.Response:
        return self._request("POST", "/auth/register", json=user_data)

    def logout(self) -> None:
        self.session.clear()
        self.navigate(LOGIN_ROUTE)

    # -------------------------------------------------------------------------
    # Cases
    # -------------------------------------------------------------------------

    def list_cases(self, page: int = 1, limit: int = 10) -> requests.Response:
        return self._request("GET", "/cases", params={"page": page, "limit": limit})

    def get_case(self, case_id) -> requests.Response:
        return self._request("GET", f"/cases/{case_id}")

    def create_case(self, case_data: Dict[str, Any]) -> requests.Response:
        return self._request("POST", "/cases", json=case_data)

    def update_case(self, case_id, case_data: Dict[str, Any]) -> requests.Response:
        return self._request("PUT", f"/cases/{case_id}", json=case_data)

    def delete_case(self, case_id) -> requests.Response:
        return self._request("DELETE", f"/cases/{case_id}")

    def update_status(self, case_id, status: str, stage: Optional[str] = None) -> requests.Response:
        body = {"status": status}
        if stage is not None:
            body["stage"] = stage
        return self._request("PATCH", f"/cases/{case_id}/status", json=body)

    def add_progress_note(self, case_id, note: Dict[str, Any]) -> requests.Response:
        return self._request("POST", f"/cases/{case_id}/progress-notes", json=note)

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def upload_document(self, case_id, path: str) -> requests.Response:
        """Upload one file as multipart form data under the ``document`` field."""
        file_name = os.path.basename(path)
        content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        with open(path, "rb") as f:
            # None drops the session's JSON content type so requests can set
            # the multipart boundary
            return self._request(
                "POST",
                f"/cases/{case_id}/documents",
                files={"document": (file_name, f, content_type)},
                headers={"Content-Type": None},
            )

    def list_documents(self, case_id) -> requests.Response:
        return self._request("GET", f"/cases/{case_id}/documents")

    def delete_document(self, case_id, document_id) -> requests.Response:
        return self._request("DELETE", f"/cases/{case_id}/documents/{document_id}")

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def list_users(self) -> requests.Response:
        return self._request("GET", "/users")

    def get_user(self, user_id) -> requests.Response:
        return self._request("GET", f"/users/{user_id}")

    def update_user(self, user_id, user_data: Dict[str, Any]) -> requests.Response:
        return self._request("PUT", f"/users/{user_id}", json=user_data)

    def delete_user(self, user_id) -> requests.Response:
        return self._request("DELETE", f"/users/{user_id}")

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    def dashboard_stats(self) -> requests.Response:
        return self._request("GET", "/dashboard/stats")


def _json_or_empty(response: requests.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
