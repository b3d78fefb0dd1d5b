"""Connection / write-acknowledgement status shown next to the calendar."""

import logging
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DISCONNECTED = "disconnected"
CONNECTING = "connecting"
SYNCED = "synced"
SYNCING = "syncing"
ERROR = "error"

STATUSES = (DISCONNECTED, CONNECTING, SYNCED, SYNCING, ERROR)

LABELS = {
    DISCONNECTED: "Disconnected",
    CONNECTING: "Connecting...",
    SYNCED: "Synced",
    SYNCING: "Saving...",
    ERROR: "Offline",
}

# error is reachable from every state and is added in report()
TRANSITIONS = {
    DISCONNECTED: {CONNECTING},
    CONNECTING: {SYNCED, SYNCING},
    SYNCED: {SYNCED, SYNCING},
    SYNCING: {SYNCED, SYNCING},
    ERROR: {SYNCED, SYNCING},
}

SYNC_TIMEOUT_S = 8.0

Listener = Callable[[str, str], None]


class SyncStatus:
    def __init__(self, timeout: float = SYNC_TIMEOUT_S, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self.clock = clock
        self.state = DISCONNECTED
        self.deadline: Optional[float] = None
        self._listeners: List[Listener] = []

    @property
    def label(self) -> str:
        return LABELS[self.state]

    def add_listener(self, listener: Listener):
        self._listeners.append(listener)
        listener(self.state, self.label)

    def can_move(self, status: str) -> bool:
        if status == ERROR:
            return True
        return status in TRANSITIONS.get(self.state, ())

    def start(self, now: Optional[float] = None) -> bool:
        """Enter connecting and arm the watchdog."""
        if not self.report(CONNECTING):
            return False
        self.deadline = (self.clock() if now is None else now) + self.timeout
        return True

    def report(self, status: str) -> bool:
        if status not in STATUSES:
            logger.warning("Unknown sync status %r ignored", status)
            return False
        if not self.can_move(status):
            logger.debug("Sync transition %s -> %s ignored", self.state, status)
            return False
        previous = self.state
        self.state = status
        if status != CONNECTING:
            self.deadline = None
        if previous != status:
            self._notify()
        return True

    def check_timeout(self, now: Optional[float] = None) -> bool:
        """Fail a connection that never confirmed; returns True when it fired."""
        if self.state != CONNECTING or self.deadline is None:
            return False
        current = self.clock() if now is None else now
        if current < self.deadline:
            return False
        logger.warning("No sync confirmation within %.1fs, marking offline", self.timeout)
        return self.report(ERROR)

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.state, self.label)
