import logging
import os
import queue
import re
import sys
import threading
import tkinter as tk

from dotenv import load_dotenv

from logic.api import ApiClient, LOGIN_ROUTE
from logic.session import TokenStore
from ui.case_detail_frame import CaseDetailFrame
from ui.cases_frame import CasesFrame
from ui.intake_frame import IntakeFrame
from ui.login_frame import LoginFrame

logger = logging.getLogger(__name__)

CASE_ROUTE = re.compile(r"^/cases/([^/]+)$")


class App(tk.Tk):
    def __init__(self, api=None, session=None):
        super().__init__()
        self.title("Distress Case Management")
        self.geometry("1100x650")

        self.session = session or TokenStore()
        self.api = api or ApiClient(self.session, navigate=self.navigate)

        # results of worker threads, drained on the Tk thread
        self._pending = queue.Queue()
        self.current_route = None

        # Main container that hosts all pages
        container = tk.Frame(self)
        container.pack(fill="both", expand=True)
        container.grid_rowconfigure(0, weight=1)
        container.grid_columnconfigure(0, weight=1)

        self.frames = {}
        for F in (LoginFrame, CasesFrame, CaseDetailFrame, IntakeFrame):
            frame = F(parent=container, controller=self)
            self.frames[F.__name__] = frame
            frame.grid(row=0, column=0, sticky="nsew")

        self.after(50, self._drain)
        self._show_route("/" if self.session.get() else LOGIN_ROUTE)

    # ---------- routing ----------
    def navigate(self, route: str):
        """Change route. Safe from any thread; applied on the Tk thread."""
        self._pending.put(lambda: self._show_route(route))

    def _show_route(self, route: str):
        match = CASE_ROUTE.match(route)
        if route == LOGIN_ROUTE:
            self.show_frame("LoginFrame")
        elif route == "/cases/new":
            self.show_frame("IntakeFrame")
        elif match:
            self.show_frame("CaseDetailFrame", case_id=match.group(1))
        else:
            route = "/"
            self.show_frame("CasesFrame")
        self.current_route = route
        logger.debug("Route %s", route)

    def show_frame(self, name: str, **params):
        frame = self.frames[name]
        frame.tkraise()
        if hasattr(frame, "on_show"):
            frame.on_show(**params)

    # ---------- background work ----------
    def run_async(self, fn, on_done=None):
        """
        Run a blocking call on a worker thread.

        ``on_done(result, error)`` is called back on the Tk thread.
        """
        def worker():
            try:
                result, error = fn(), None
            except Exception as exc:
                logger.exception("Background task failed")
                result, error = None, exc
            if on_done is not None:
                self._pending.put(lambda: on_done(result, error))

        threading.Thread(target=worker, daemon=True).start()

    def _drain(self):
        try:
            while True:
                callback = self._pending.get_nowait()
                callback()
        except queue.Empty:
            pass
        finally:
            self.after(50, self._drain)


def main():
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, os.getenv("DISTRESS_LOG_LEVEL", "INFO").upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    app = App()
    app.mainloop()


if __name__ == "__main__":
    main()
