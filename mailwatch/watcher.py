"""Pipeline triggers: watchdog change notifications and a polling timer.

Both producers put tokens on one queue; the service loop is the only
consumer, so pipeline passes never overlap.
"""

import logging
import os
import queue
import threading

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

logger = logging.getLogger(__name__)

TICK = "tick"
CHANGE = "change"


class LogChangeHandler(FileSystemEventHandler):
    """Enqueues a CHANGE token whenever the tailed file is touched."""

    def __init__(self, log_path: str, q: queue.Queue):
        super().__init__()
        self._path = os.path.abspath(log_path)
        self._queue = q

    @property
    def watched_dir(self) -> str:
        return os.path.dirname(self._path)

    def _matches(self, path) -> bool:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        return os.path.abspath(path) == self._path

    def on_modified(self, event):
        if not event.is_directory and self._matches(event.src_path):
            self._queue.put(CHANGE)

    def on_created(self, event):
        if not event.is_directory and self._matches(event.src_path):
            logger.info("Mail log created: %s", self._path)
            self._queue.put(CHANGE)

    def on_moved(self, event):
        if not event.is_directory and self._matches(event.dest_path):
            self._queue.put(CHANGE)


class PollTicker(threading.Thread):
    """Enqueues a TICK token every *interval* seconds until stopped."""

    def __init__(self, q: queue.Queue, interval: float):
        super().__init__(daemon=True)
        self._queue = q
        self._interval = interval
        self._stopped = threading.Event()

    def run(self):
        while not self._stopped.wait(self._interval):
            self._queue.put(TICK)

    def stop(self):
        self._stopped.set()


def build_observer(handler: LogChangeHandler, use_polling: bool = False):
    """Schedule *handler* on the tailed file's directory. Not started."""
    observer = PollingObserver() if use_polling else Observer()
    observer.schedule(handler, handler.watched_dir, recursive=False)
    logger.info("Watching directory: %s", handler.watched_dir)
    return observer


def drain(q: queue.Queue) -> int:
    """Discard triggers queued behind the one being handled. Returns how many."""
    dropped = 0
    while True:
        try:
            q.get_nowait()
        except queue.Empty:
            return dropped
        dropped += 1
