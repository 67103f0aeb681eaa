"""Tests for the log cursor."""

import logging
import os
import tempfile
import unittest

from mailwatch.cursor import LogCursor


class TestLogCursor(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.mkdtemp()
        self._path = os.path.join(self._tmpdir, "mail.log")

    def _write(self, text: str, mode: str = "w"):
        with open(self._path, mode, encoding="utf-8", newline="") as f:
            f.write(text)

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            LogCursor(os.path.join(self._tmpdir, "nope.log"))

    def test_initial_poll_reads_backlog(self):
        self._write("line 1\nline 2\n")
        c = LogCursor(self._path)
        self.assertEqual(c.poll(), ["line 1", "line 2"])
        self.assertEqual(c.offset, os.path.getsize(self._path))
        self.assertEqual(c.offset, c.last_size)

    def test_incremental_reads(self):
        self._write("line 1\n")
        c = LogCursor(self._path)
        c.poll()
        self._write("line 2\nline 3\n", mode="a")
        self.assertEqual(c.poll(), ["line 2", "line 3"])

    def test_no_new_data_returns_empty(self):
        self._write("line 1\n")
        c = LogCursor(self._path)
        c.poll()
        self.assertEqual(c.poll(), [])

    def test_partial_line_held_until_newline(self):
        self._write("line 1\nhalf of li")
        c = LogCursor(self._path)
        self.assertEqual(c.poll(), ["line 1"])
        self._write("ne 2\n", mode="a")
        self.assertEqual(c.poll(), ["half of line 2"])
        self.assertEqual(c.poll(), [])

    def test_split_multibyte_character(self):
        data = "envio concluído\n".encode("utf-8")
        cut = data.index("í".encode("utf-8")) + 1
        with open(self._path, "wb") as f:
            f.write(data[:cut])
        c = LogCursor(self._path)
        self.assertEqual(c.poll(), [])
        with open(self._path, "ab") as f:
            f.write(data[cut:])
        self.assertEqual(c.poll(), ["envio concluído"])

    def test_crlf_stripped(self):
        self._write("line 1\r\n")
        c = LogCursor(self._path)
        self.assertEqual(c.poll(), ["line 1"])

    def test_truncation_resets_offset(self):
        self._write("x" * 999 + "\n")
        c = LogCursor(self._path)
        c.poll()
        self.assertEqual(c.offset, 1000)
        self.assertEqual(c.last_size, 1000)

        # Replaced by a shorter generation of the log
        self._write("y" * 199 + "\n")
        lines = c.poll()
        self.assertEqual(lines, ["y" * 199])
        self.assertEqual(c.offset, 200)
        self.assertLessEqual(c.offset, c.last_size)

    def test_truncation_drops_stale_partial(self):
        self._write("a" * 50 + "\n" + "stale partial")
        c = LogCursor(self._path)
        c.poll()
        self._write("fresh\n")
        self.assertEqual(c.poll(), ["fresh"])

    def test_inode_change_resets_offset(self):
        c = LogCursor.__new__(LogCursor)
        c.path = self._path
        c.offset = 500
        c.inode = 100
        c._partial = b""
        self.assertTrue(c.check_truncation(1000, 200))
        self.assertEqual(c.offset, 0)
        self.assertEqual(c.inode, 200)

    def test_no_reset_when_file_grows(self):
        c = LogCursor.__new__(LogCursor)
        c.path = self._path
        c.offset = 500
        c.inode = 100
        c._partial = b""
        self.assertFalse(c.check_truncation(1000, 100))
        self.assertEqual(c.offset, 500)

    def test_rotation_by_rename(self):
        self._write("old 1\nold 2\n")
        c = LogCursor(self._path)
        c.poll()
        os.rename(self._path, self._path + ".1")
        self._write("new 1\nnew 2\nnew 3\n")
        self.assertEqual(c.poll(), ["new 1", "new 2", "new 3"])

    def test_stat_failure_logged_and_recovers(self):
        self._write("line 1\n")
        c = LogCursor(self._path)
        c.poll()
        os.remove(self._path)
        with self.assertLogs("mailwatch.cursor", level=logging.ERROR):
            self.assertEqual(c.poll(), [])
        # Shorter than the old offset, so the reset holds even if the inode is reused
        self._write("l2\n")
        self.assertEqual(c.poll(), ["l2"])


if __name__ == "__main__":
    unittest.main()
