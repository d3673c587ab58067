import logging
import os
import threading
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_FILE = os.path.join(os.path.expanduser("~"), ".distress_desk", "token")


class TokenStore:
    """
    Client-local storage for the session token.

    The token lives in a small file so a restart keeps the user signed in.
    Worker threads clear it on 401 while the UI thread reads it, so every
    access goes through one lock.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or os.getenv("DISTRESS_TOKEN_FILE") or DEFAULT_TOKEN_FILE
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    token = f.read().strip()
            except FileNotFoundError:
                return None
        return token or None

    def set(self, token: str) -> None:
        with self._lock:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            # owner-only; the token is a bearer credential
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(token)
        logger.info("Session token stored")

    def clear(self) -> None:
        with self._lock:
            try:
                os.remove(self.path)
            except FileNotFoundError:
                return
        logger.info("Session token cleared")
