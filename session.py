"""
The calendar's state holder: displayed month, latest snapshots and the one
live completion subscription. Every view reads from here and recomputes
from the snapshots on each render.
"""

import logging
from datetime import date
from typing import Callable, Dict, List, Optional

from grid import build_grid, everyday_rows, legend_entries, month_label
from models import Routine
from progress import evaluate_milestones, weekly_progress
from schedule import is_done, shift_month

logger = logging.getLogger(__name__)


class CalendarSession:
    def __init__(self, store, today: Optional[date] = None):
        self.store = store
        start = today or date.today()
        self.year = start.year
        self.month = start.month
        self.routines: List[Routine] = []
        self.completions: Dict[str, Dict[str, bool]] = {}
        self._unsub_routines = None
        self._unsub_completions = None
        self._listeners: List[Callable[[], None]] = []

    # ---------- Wiring ----------
    def add_listener(self, listener: Callable[[], None]):
        """Called after every snapshot change or month switch."""
        self._listeners.append(listener)

    def _changed(self):
        for listener in list(self._listeners):
            listener()

    def start(self):
        if self._unsub_routines is None:
            self._unsub_routines = self.store.subscribe_routines(self._on_routines)
        self._subscribe_month()

    def stop(self):
        if self._unsub_routines:
            self._unsub_routines()
            self._unsub_routines = None
        if self._unsub_completions:
            self._unsub_completions()
            self._unsub_completions = None

    def _on_routines(self, routines):
        self.routines = list(routines)
        self._changed()

    def _subscribe_month(self):
        # tear down the old month before the new subscription can deliver
        if self._unsub_completions:
            self._unsub_completions()
            self._unsub_completions = None
        year, month = self.year, self.month

        def on_completions(completions):
            if (year, month) != (self.year, self.month):
                logger.debug("Dropping stale completions for %04d-%02d", year, month)
                return
            self.completions = completions
            self._changed()

        self.completions = {}
        self._unsub_completions = self.store.subscribe_completions(year, month, on_completions)

    # ---------- Navigation ----------
    def show_month(self, year: int, month: int):
        if (year, month) == (self.year, self.month) and self._unsub_completions:
            return
        self.year, self.month = year, month
        self._subscribe_month()
        self._changed()

    def next_month(self):
        self.show_month(*shift_month(self.year, self.month, 1))

    def prev_month(self):
        self.show_month(*shift_month(self.year, self.month, -1))

    # ---------- Actions ----------
    def toggle(self, date_str: str, routine_id: str) -> bool:
        """
        Ask the store to flip one slot. The snapshot is left alone; the new
        value shows up with the next pushed snapshot.
        """
        currently_done = is_done(self.completions, date_str, routine_id)
        return self.store.toggle_completion(date_str, routine_id, currently_done)

    # ---------- Derived views ----------
    @property
    def label(self) -> str:
        return month_label(self.year, self.month)

    def grid(self, today: Optional[date] = None):
        return build_grid(self.year, self.month, self.routines, self.completions, today)

    def legend(self):
        return legend_entries(self.routines)

    def everyday(self, today: Optional[date] = None):
        return everyday_rows(self.year, self.month, self.routines, self.completions, today)

    def weeks(self):
        return weekly_progress(self.year, self.month, self.routines, self.completions)

    def milestones(self):
        return evaluate_milestones(self.weeks())
