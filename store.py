"""
Live routine store: the subscribe / write surface the calendar talks to.

Subscribers receive fresh snapshots (a list of Routine, or a nested
date -> routine id -> done map for one month) every time the underlying
data changes. Writes never raise; failures are logged and surface only as
an "error" sync status.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from models import Routine
from repo_json import JSONRepo
from sync_status import ERROR, SYNCED, SYNCING

logger = logging.getLogger(__name__)

RoutinesCallback = Callable[[List[Routine]], None]
CompletionsCallback = Callable[[Dict[str, Dict[str, bool]]], None]


class RoutineStore:
    """Listener bookkeeping shared by the local and remote stores."""

    def __init__(self):
        self._routine_listeners: Dict[int, RoutinesCallback] = {}
        self._completion_listeners: Dict[int, Tuple[int, int, CompletionsCallback]] = {}
        self._sync_callbacks: List[Callable[[str], None]] = []
        self._next_token = 0

    # ---------- Backend hooks ----------
    def _fetch_routines(self):
        raise NotImplementedError

    def _fetch_completions(self, year: int, month: int):
        raise NotImplementedError

    def _write(self, request_type: str, **payload):
        raise NotImplementedError

    def _after_write(self, request_type: str, payload: dict):
        """Called after a successful write; push-based backends do nothing here."""

    # ---------- Sync status ----------
    def on_sync_status(self, callback: Callable[[str], None]):
        self._sync_callbacks.append(callback)

    def _report_sync(self, status: str):
        for callback in list(self._sync_callbacks):
            callback(status)

    # ---------- Subscriptions ----------
    def _token(self) -> int:
        self._next_token += 1
        return self._next_token

    def subscribe_routines(self, on_change: RoutinesCallback):
        token = self._token()
        self._routine_listeners[token] = on_change
        self._deliver_routines([on_change])

        def unsubscribe():
            self._routine_listeners.pop(token, None)

        return unsubscribe

    def subscribe_completions(self, year: int, month: int, on_change: CompletionsCallback):
        token = self._token()
        self._completion_listeners[token] = (year, month, on_change)
        self._deliver_completions(year, month, [on_change])

        def unsubscribe():
            self._completion_listeners.pop(token, None)

        return unsubscribe

    def _deliver_routines(self, callbacks):
        routines, error = self._fetch_routines()
        if error:
            logger.error("Routines subscribe error: %s", error)
            self._report_sync(ERROR)
            return
        self._report_sync(SYNCED)
        for callback in callbacks:
            callback(list(routines))

    def _deliver_completions(self, year, month, callbacks):
        completions, error = self._fetch_completions(year, month)
        if error:
            logger.error("Completions subscribe error: %s", error)
            self._report_sync(ERROR)
            return
        self._report_sync(SYNCED)
        for callback in callbacks:
            # each subscriber gets its own copy of the snapshot
            callback({day: dict(states) for day, states in completions.items()})

    def notify_routines(self):
        if self._routine_listeners:
            self._deliver_routines(list(self._routine_listeners.values()))

    def notify_completions(self, date_str: Optional[str] = None):
        """Re-deliver completions to subscribers of the month containing date_str (or all)."""
        months: Dict[Tuple[int, int], list] = {}
        for year, month, callback in list(self._completion_listeners.values()):
            if date_str and not date_str.startswith(f"{year:04d}-{month:02d}-"):
                continue
            months.setdefault((year, month), []).append(callback)
        for (year, month), callbacks in months.items():
            self._deliver_completions(year, month, callbacks)

    # ---------- Writes ----------
    def _run_write(self, label: str, request_type: str, **payload):
        self._report_sync(SYNCING)
        result, error = self._write(request_type, **payload)
        if error:
            logger.error("%s error: %s", label, error)
            self._report_sync(ERROR)
            return None, error
        self._report_sync(SYNCED)
        self._after_write(request_type, payload)
        return result, None

    def create_routine(self, fields: dict) -> Optional[str]:
        routine_id, _ = self._run_write("create_routine", "create_routine", fields=fields)
        return routine_id

    def update_routine(self, routine_id: str, fields: dict) -> bool:
        _, error = self._run_write("update_routine", "update_routine", id=routine_id, fields=fields)
        return error is None

    def delete_routine(self, routine_id: str) -> bool:
        _, error = self._run_write("delete_routine", "delete_routine", id=routine_id)
        return error is None

    def toggle_completion(self, date_str: str, routine_id: str, currently_done: bool) -> bool:
        """Write the negation of the last known value for (date, routine)."""
        _, error = self._run_write(
            "toggle_completion",
            "set_completion",
            date=date_str,
            routine_id=routine_id,
            done=not currently_done,
        )
        return error is None


class LocalStore(RoutineStore):
    """In-process store over a JSONRepo; writes push snapshots immediately."""

    def __init__(self, repo: JSONRepo):
        super().__init__()
        self.repo = repo

    def _fetch_routines(self):
        return self.repo.list_routines(), None

    def _fetch_completions(self, year, month):
        return self.repo.completions_for_month(year, month), None

    def _write(self, request_type, **payload):
        try:
            return apply_write(self.repo, request_type, payload)
        except OSError as exc:
            # the repo mutates in memory before writing; go back to what is on disk
            self.repo.reload()
            return None, f"Could not write {self.repo.path}: {exc}"

    def _after_write(self, request_type, payload):
        if request_type == "set_completion":
            self.notify_completions(payload["date"])
        elif request_type == "delete_routine":
            self.notify_routines()
            self.notify_completions()
        else:
            self.notify_routines()


def apply_write(repo: JSONRepo, request_type: str, payload: dict):
    """
    Run one write against the repo.
    Returns (result, error_message_or_None).
    """
    if request_type == "create_routine":
        return repo.create_routine(payload["fields"]), None
    if request_type == "update_routine":
        if not repo.update_routine(payload["id"], payload["fields"]):
            return None, f"Routine '{payload['id']}' not found."
        return True, None
    if request_type == "delete_routine":
        if not repo.delete_routine(payload["id"]):
            return None, f"Routine '{payload['id']}' not found."
        return True, None
    if request_type == "set_completion":
        completion = repo.set_completion(payload["date"], payload["routine_id"], payload["done"])
        return completion.done, None
    return None, f"Unsupported write '{request_type}'."
