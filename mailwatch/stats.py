"""Running outcome counters for the process lifetime."""

import time
from datetime import datetime, timezone

from mailwatch.models import OUTCOMES


class StatusCounters:
    def __init__(self):
        self._counters: dict[str, int] = {outcome: 0 for outcome in OUTCOMES}
        self._start_time = time.time()

    def increment(self, outcome: str, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError("counters never decrease")
        self._counters[outcome] = self._counters.get(outcome, 0) + amount

    def get(self, outcome: str) -> int:
        return self._counters.get(outcome, 0)

    @property
    def total(self) -> int:
        return sum(self._counters.values())

    def as_dict(self) -> dict[str, int]:
        return dict(self._counters)

    def get_all(self) -> dict:
        return {
            "counters": self.as_dict(),
            "total": self.total,
            "uptime_seconds": round(time.time() - self._start_time, 1),
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }
