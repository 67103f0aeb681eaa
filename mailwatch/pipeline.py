"""One pipeline pass: cursor delta -> parser -> correlation store -> sink -> reporter."""

import logging

from mailwatch.context import MonitorContext
from mailwatch.cursor import LogCursor
from mailwatch.parsers import parse_line

logger = logging.getLogger(__name__)


class MailLogPipeline:
    def __init__(self, cursor: LogCursor, context: MonitorContext):
        self._cursor = cursor
        self._ctx = context
        self._passes = 0

    @property
    def passes(self) -> int:
        return self._passes

    def process_lines(self, lines) -> int:
        """Feed lines in order through parser and store. Returns outcomes emitted."""
        before = self._ctx.sink.emitted
        for line in lines:
            if not line.strip():
                continue
            self._ctx.store.apply(parse_line(line))
        return self._ctx.sink.emitted - before

    def run_once(self) -> int:
        """Poll the cursor once and process the delta. Renders if anything was emitted."""
        lines = self._cursor.poll()
        self._passes += 1
        emitted = self.process_lines(lines)
        if emitted:
            self._ctx.reporter.display()
        return emitted

    def load_backlog(self) -> int:
        """Process the whole existing file once, before live tailing starts."""
        lines = self._cursor.poll()
        self._passes += 1
        emitted = self.process_lines(lines)
        logger.info(
            "Backlog: %d lines, %d outcomes, %d open messages",
            len(lines), emitted, len(self._ctx.store),
        )
        self._ctx.reporter.display()
        return emitted
