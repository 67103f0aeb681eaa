"""EventSink: formats outcomes, writes them to the channels, updates history and counters."""

import logging

from mailwatch.formatter import format_outcome
from mailwatch.history import RecentHistory
from mailwatch.models import SUCCESS
from mailwatch.stats import StatusCounters


class EventSink:
    def __init__(
        self,
        results: logging.Logger,
        errors: logging.Logger,
        history: RecentHistory,
        counters: StatusCounters,
    ):
        self._results = results
        self._errors = errors
        self._history = history
        self._counters = counters
        self._emitted = 0

    @property
    def emitted(self) -> int:
        return self._emitted

    def emit(
        self,
        outcome: str,
        message_id: str,
        recipient: str | None = None,
        status: str | None = None,
        detail: str | None = None,
        dsn_id: str | None = None,
        dsn_status: str | None = None,
    ) -> str:
        """Publish one outcome and return the formatted line."""
        line = format_outcome(
            outcome, message_id,
            recipient=recipient, status=status, detail=detail,
            dsn_id=dsn_id, dsn_status=dsn_status,
        )
        if outcome == SUCCESS:
            self._results.info(line)
        else:
            self._errors.error(line)
        self._history.add(line)
        self._counters.increment(outcome)
        self._emitted += 1
        return line

    def unrecognized(self, raw_line: str):
        """Lines no rule matched: warn and drop."""
        self._errors.warning("Unrecognized line: %s", raw_line.strip())
