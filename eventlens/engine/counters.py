"""Process-lifetime occurrence counters.

Both counters are owned by the MetricTracker and injected at construction.
Increments are atomic: under any number of concurrent callers every
``increment()`` returns a distinct value and the final value equals the
number of calls.  Values reset only when the process restarts.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


class OccurrenceCounter:
    """Strictly monotonic integer counter safe across threads and tasks."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def increment(self) -> int:
        """Add one and return the new value."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass
class OccurrenceCounters:
    """The two counters shared by every derivation call."""

    events: OccurrenceCounter = field(default_factory=OccurrenceCounter)
    warnings: OccurrenceCounter = field(default_factory=OccurrenceCounter)
