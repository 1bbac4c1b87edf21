"""Tests for the error taxonomy and structured log events."""

from __future__ import annotations

import io
import json
import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from statustree.errors import (
    BusyError,
    ChildMarkedError,
    MarkConflictError,
    NoEntryAtCursorError,
    ParentMarkedError,
    ProviderError,
    StatusTreeError,
    format_error,
    wrap_error,
)
from statustree.logging import LOG_DIR_ENV, configure_logging, get_logger, log_event
from statustree.tree_model.types import State


class ErrorTests(unittest.TestCase):
    def test_mark_conflicts_share_base_and_carry_blocking_path(self) -> None:
        error = ParentMarkedError("src")

        self.assertIsInstance(error, MarkConflictError)
        self.assertIsInstance(ChildMarkedError("a"), StatusTreeError)
        self.assertEqual(error.blocking_path, "src")
        self.assertEqual(format_error(error), "[parent_marked] Parent directory already marked (src)")

    def test_format_error_without_detail(self) -> None:
        self.assertEqual(format_error(NoEntryAtCursorError()), "[no_entry] No entry at cursor")
        self.assertEqual(format_error(BusyError("full")), "[busy] Another refresh is already running (full)")
        self.assertEqual(format_error(ValueError("plain")), "plain")

    def test_wrap_error_keeps_typed_errors(self) -> None:
        typed = ProviderError("git failed", detail="exit 128")
        self.assertIs(wrap_error(typed, message="ignored"), typed)

        wrapped = wrap_error(OSError("no git"), message="Status provider failed")
        self.assertIsInstance(wrapped, ProviderError)
        self.assertEqual(str(wrapped), "Status provider failed (no git)")


class StateCoercionTests(unittest.TestCase):
    def test_coerce(self) -> None:
        self.assertIs(State.coerce(None), State.NONE)
        self.assertIs(State.coerce("EDITED"), State.EDITED)
        self.assertIs(State.coerce("up_to_date"), State.UP_TO_DATE)
        self.assertIs(State.coerce("uptodate"), State.UP_TO_DATE)
        self.assertIs(State.coerce("bogus"), State.UNKNOWN)
        self.assertIs(State.coerce(State.ADDED), State.ADDED)


class LogEventTests(unittest.TestCase):
    def test_log_event_emits_sorted_json(self) -> None:
        logger = get_logger("statustree.test")
        with self.assertLogs("statustree.test", level="DEBUG") as logs:
            log_event(logger, "batch_merged", level=logging.DEBUG, inserted=3, kind="full")

        record = logs.records[0]
        self.assertEqual(record.levelno, logging.DEBUG)
        payload = json.loads(record.getMessage())
        self.assertEqual(payload, {"event": "batch_merged", "inserted": 3, "kind": "full"})
        self.assertEqual(list(payload), ["event", "inserted", "kind"])


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.logger = logging.getLogger("statustree.configure_test")
        self.addCleanup(self._reset_logger)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        env = mock.patch.dict(os.environ, {LOG_DIR_ENV: ""})
        env.start()
        self.addCleanup(env.stop)

    def _reset_logger(self) -> None:
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        self.logger.setLevel(logging.NOTSET)

    def test_logger_with_handlers_gets_no_log_file(self) -> None:
        existing = logging.NullHandler()
        self.logger.addHandler(existing)
        log_dir = Path(self.tmp.name) / "logs"

        attached = configure_logging(level="debug", log_dir=log_dir, logger=self.logger)

        self.assertIsNone(attached)
        self.assertEqual(self.logger.handlers, [existing])
        self.assertEqual(self.logger.level, logging.DEBUG)
        self.assertFalse(log_dir.exists())

    def test_log_dir_attaches_file_handler(self) -> None:
        log_dir = Path(self.tmp.name) / "logs"

        attached = configure_logging(log_dir=log_dir, logger=self.logger)
        self.logger.propagate = False
        self.addCleanup(setattr, self.logger, "propagate", True)
        log_event(self.logger, "refresh_started", kind="full")
        attached.flush()

        self.assertIsInstance(attached, logging.FileHandler)
        lines = (log_dir / "statustree.log").read_text(encoding="utf-8").splitlines()
        self.assertEqual([json.loads(line) for line in lines], [{"event": "refresh_started", "kind": "full"}])

    def test_stream_uses_text_format(self) -> None:
        stream = io.StringIO()

        configure_logging(level="warning", format_name="text", stream=stream, logger=self.logger)
        self.logger.propagate = False
        self.addCleanup(setattr, self.logger, "propagate", True)
        self.logger.info("hidden")
        self.logger.warning("shown")

        self.assertEqual(stream.getvalue(), "WARNING statustree.configure_test shown\n")

    def test_without_stream_or_dir_output_stays_quiet(self) -> None:
        attached = configure_logging(logger=self.logger)

        self.assertIsInstance(attached, logging.NullHandler)


if __name__ == "__main__":
    unittest.main()
