import logging
import os
import tkinter as tk

from repo_json import JSONRepo
from session import CalendarSession
from store import LocalStore
from sync_status import SYNC_TIMEOUT_S, SyncStatus
from ui import theme
from ui.calendar_view import CalendarView
from ui.routines_view import RoutinesView

POLL_MS = 250


def build_store():
    """Pick the store from ROUTINER_STORE: 'local' (default) or 'remote'."""
    kind = os.getenv("ROUTINER_STORE", "local").strip().lower()
    if kind == "remote":
        from store_client import RemoteStore

        store = RemoteStore()
        store.connect()
        return store
    return LocalStore(JSONRepo(os.getenv("ROUTINER_DATA", "data/routines.json")))


class App(tk.Tk):
    def __init__(self, store=None):
        super().__init__()
        self.title("Routiner")
        self.geometry("800x900")
        self.configure(bg=theme.BG)

        self.store = store or build_store()
        self.sync = SyncStatus()
        self.session = CalendarSession(self.store)

        container = tk.Frame(self)
        container.pack(fill="both", expand=True)

        self.frames = {}
        for F in (CalendarView, RoutinesView):
            frame = F(parent=container, controller=self)
            self.frames[F.__name__] = frame
            frame.grid(row=0, column=0, sticky="nsew")
        container.rowconfigure(0, weight=1)
        container.columnconfigure(0, weight=1)

        self.current = "CalendarView"
        self.sync.add_listener(self.frames["CalendarView"].set_sync_status)
        self.store.on_sync_status(self.sync.report)
        self.session.add_listener(self._on_session_change)

        # connecting must be entered before the first snapshot reports synced
        self.sync.start()
        self.after(int(SYNC_TIMEOUT_S * 1000), self.sync.check_timeout)
        self.session.start()
        self.show("CalendarView")

        if hasattr(self.store, "poll"):
            self.after(POLL_MS, self._poll)
        self.protocol("WM_DELETE_WINDOW", self.close)

    def show(self, name):
        self.current = name
        frame = self.frames[name]
        if hasattr(frame, "refresh"):
            frame.refresh()
        frame.tkraise()

    def _on_session_change(self):
        # routine edits also change the list screen, so refresh whichever is showing
        self.frames[self.current].refresh()

    def _poll(self):
        # a failing refresh must not stop live updates
        try:
            self.store.poll()
        finally:
            self.after(POLL_MS, self._poll)

    def close(self):
        self.session.stop()
        if hasattr(self.store, "close"):
            self.store.close()
        self.destroy()


def main():
    logging.basicConfig(
        level=os.getenv("ROUTINER_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    App().mainloop()


if __name__ == "__main__":
    main()
