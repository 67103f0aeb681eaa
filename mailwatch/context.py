"""Process-lifetime context: every piece of pipeline state, built once at startup."""

import logging
import sys
from dataclasses import dataclass
from typing import TextIO

from mailwatch.channels import Channels
from mailwatch.config import Config
from mailwatch.correlator import CorrelationStore
from mailwatch.history import RecentHistory
from mailwatch.reporter import Reporter
from mailwatch.sink import EventSink
from mailwatch.stats import StatusCounters


@dataclass
class MonitorContext:
    config: Config
    history: RecentHistory
    counters: StatusCounters
    sink: EventSink
    store: CorrelationStore
    reporter: Reporter


def build_context(
    config: Config,
    channels: Channels | None = None,
    stream: TextIO | None = None,
    time_func=None,
) -> MonitorContext:
    """Wire history, counters, sink, store and reporter for one run.

    Without explicit channels the loggers are plain named loggers, which is
    what tests use to keep runs isolated from the file handlers.
    """
    if channels is None:
        channels = Channels(
            results=logging.getLogger("mailwatch.results"),
            errors=logging.getLogger("mailwatch.errors"),
        )
    history = RecentHistory(config.history_size)
    counters = StatusCounters()
    sink = EventSink(channels.results, channels.errors, history, counters)
    store = CorrelationStore(sink, time_func=time_func)
    reporter = Reporter(history, counters, stream=stream or sys.stdout, clear=config.clear_console)
    return MonitorContext(
        config=config,
        history=history,
        counters=counters,
        sink=sink,
        store=store,
        reporter=reporter,
    )
