"""Console rendering of recent outcomes and counters, plus a JSON snapshot."""

import json
import os
import sys
import tempfile
from typing import TextIO

from mailwatch.history import RecentHistory
from mailwatch.models import OUTCOMES
from mailwatch.stats import StatusCounters

CLEAR_SCREEN = "\033[2J\033[H"


class Reporter:
    def __init__(
        self,
        history: RecentHistory,
        counters: StatusCounters,
        stream: TextIO | None = None,
        clear: bool = True,
    ):
        self._history = history
        self._counters = counters
        self._stream = stream or sys.stdout
        self._clear = clear

    def render(self) -> str:
        """Build the console view. Has no effect on history or counters."""
        entries = self._history.get_recent()
        lines = [f"Últimos {len(entries)} logs de e-mail:", ""]
        lines.extend(entries)
        lines.append("")
        lines.append("  ".join(f"{k}={self._counters.get(k)}" for k in OUTCOMES))
        lines.append("")
        lines.append("Aguardando novos logs...")
        return "\n".join(lines)

    def display(self):
        if self._clear:
            self._stream.write(CLEAR_SCREEN)
        self._stream.write(self.render() + "\n")
        self._stream.flush()

    def snapshot(self) -> dict:
        data = self._counters.get_all()
        data["total_emitted"] = self._history.total_added
        data["recent"] = self._history.get_recent()
        return data

    def write_snapshot(self, path: str):
        """Write counters and history as JSON atomically (tmp file + os.replace)."""
        directory = os.path.dirname(path) or "."
        os.makedirs(directory, exist_ok=True)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                json.dump(self.snapshot(), f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
