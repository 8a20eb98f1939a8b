"""In-memory tick bookkeeping for the sync loops.

Each loop owns one :class:`LoopStatus`. The loop thread writes to it and the
status API reads it, so every access goes through the record's own lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Literal

TickOutcome = Literal["ok", "error"]


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass(frozen=True, slots=True)
class LoopStatusRecord:
    """Point-in-time view of a loop's progress."""

    name: str
    interval_seconds: int
    ticks: int = 0
    failed_ticks: int = 0
    last_outcome: TickOutcome | None = None
    last_error: str | None = None
    last_started_at: str | None = None
    last_finished_at: str | None = None


@dataclass
class LoopStatus:
    name: str
    interval_seconds: int
    _record: LoopStatusRecord = field(init=False)

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._record = LoopStatusRecord(name=self.name, interval_seconds=self.interval_seconds)

    def tick_started(self) -> None:
        with self._lock:
            self._record = replace(self._record, last_started_at=_utc_iso_now())

    def tick_finished(self, outcome: TickOutcome, error: str | None = None) -> None:
        with self._lock:
            record = self._record
            self._record = replace(
                record,
                ticks=record.ticks + 1,
                failed_ticks=record.failed_ticks + (1 if outcome == "error" else 0),
                last_outcome=outcome,
                last_error=error,
                last_finished_at=_utc_iso_now(),
            )

    def get(self) -> LoopStatusRecord:
        with self._lock:
            return self._record
