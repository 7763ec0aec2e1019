"""Thread-safe memo for report proteins built during one assembly run."""

from __future__ import annotations

from concurrent.futures import Future
from threading import Lock
from typing import Callable

from proinfer.report import ReportProtein


class ProteinMap(dict):
    """``dict`` of group id to :class:`ReportProtein` with single-build semantics.

    The first thread asking for an id builds the protein; threads asking for
    the same id meanwhile wait for that build instead of repeating it.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._lock = Lock()
        self._pending: dict[int, Future] = {}

    def get_or_build(self, group_id: int, build: Callable[[], ReportProtein]) -> ReportProtein:
        with self._lock:
            if group_id in self:
                return self[group_id]
            future = self._pending.get(group_id)
            owner = future is None
            if owner:
                future = Future()
                self._pending[group_id] = future

        if not owner:
            return future.result()

        try:
            protein = build()
        except BaseException as exc:
            with self._lock:
                del self._pending[group_id]
            future.set_exception(exc)
            raise

        with self._lock:
            self[group_id] = protein
            del self._pending[group_id]
        future.set_result(protein)
        return protein
