"""Byte-offset cursor over a growing log file.

Reads only the bytes appended since the last poll. Handles truncation (file
smaller than the offset) and rotation (inode changed) by starting over at
byte 0. A trailing line without its newline is held back and prefixed to the
next delta.
"""

import logging
import os

logger = logging.getLogger(__name__)


class LogCursor:
    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        if not os.path.exists(self.path):
            raise FileNotFoundError(f"Mail log not found: {self.path}")
        self.offset: int = 0
        self.last_size: int = 0
        self.inode: int | None = None
        self._partial = b""

    def check_truncation(self, current_size: int, current_inode: int) -> bool:
        """Reset offset if the file was truncated or replaced. Returns True on reset."""
        rotated = self.inode is not None and current_inode != self.inode
        truncated = current_size < self.offset
        self.inode = current_inode
        if not (rotated or truncated):
            return False
        if rotated:
            logger.info("Log rotated (inode changed): %s", self.path)
        else:
            logger.info("Log truncated (%d < %d bytes): %s", current_size, self.offset, self.path)
        self.offset = 0
        self._partial = b""
        return True

    def poll(self) -> list[str]:
        """Read the delta since the last poll and return its complete lines."""
        try:
            stat = os.stat(self.path)
            self.check_truncation(stat.st_size, stat.st_ino)
            self.last_size = stat.st_size
            if stat.st_size <= self.offset:
                return []
            with open(self.path, "rb") as f:
                f.seek(self.offset)
                data = f.read(stat.st_size - self.offset)
        except OSError as e:
            logger.error("Failed to read mail log %s: %s", self.path, e)
            return []

        self.offset += len(data)
        return self._split(data)

    def _split(self, data: bytes) -> list[str]:
        data = self._partial + data
        chunks = data.split(b"\n")
        # Last element is b"" when data ends with a newline, else a partial line
        self._partial = chunks.pop()
        return [c.rstrip(b"\r").decode("utf-8", errors="replace") for c in chunks]
