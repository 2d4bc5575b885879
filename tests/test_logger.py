"""Tests for logger.py: setup_logging() and JsonFormatter.

Strategy: Mock logging.basicConfig to verify setup_logging passes correct args,
since pytest's log capture plugin interferes with actual basicConfig calls.
"""

import json
import logging
import sys
from unittest.mock import patch

from git_ext_tree.logger import JsonFormatter, setup_logging


class TestSetupLogging:
    """Tests for setup_logging()."""

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_logs_to_stderr(self, mock_basic):
        """A StreamHandler(stderr) is always installed."""
        setup_logging()

        mock_basic.assert_called_once()
        handlers = mock_basic.call_args[1]["handlers"]
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_default_level_is_info(self, mock_basic):
        setup_logging()

        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_level_name_honored(self, mock_basic):
        setup_logging(level="error")

        assert mock_basic.call_args[1]["level"] == logging.ERROR

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_quiet_raises_to_warning(self, mock_basic):
        setup_logging(quiet=True)

        assert mock_basic.call_args[1]["level"] == logging.WARNING

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_debug_beats_quiet_and_level(self, mock_basic):
        setup_logging(level="ERROR", quiet=True, debug=True)

        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_plain_messages_without_debug(self, mock_basic):
        """Progress output is the bare message unless debugging."""
        setup_logging()

        handler = mock_basic.call_args[1]["handlers"][0]
        record = logging.LogRecord(
            "git_ext_tree", logging.INFO, __file__, 1, "init complete!", None, None
        )
        assert handler.formatter.format(record) == "init complete!"

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_with_log_file(self, mock_basic, tmp_path):
        """log_file adds a FileHandler next to the stderr handler."""
        log_file = str(tmp_path / "ext-tree.log")
        setup_logging(log_file=log_file)

        handlers = mock_basic.call_args[1]["handlers"]
        file_handlers = [
            h for h in handlers if isinstance(h, logging.FileHandler)
        ]
        assert len(handlers) == 2
        assert len(file_handlers) == 1
        for h in file_handlers:
            h.close()

    @patch("git_ext_tree.logger.logging.basicConfig")
    def test_json_format_uses_json_formatter(self, mock_basic):
        setup_logging(debug_format="json")

        handlers = mock_basic.call_args[1]["handlers"]
        assert all(isinstance(h.formatter, JsonFormatter) for h in handlers)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_fields(self):
        formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        record = logging.LogRecord(
            "git_ext_tree.sync.engine",
            logging.WARNING,
            __file__,
            10,
            "Merging %s",
            ("abc",),
            None,
        )

        entry = json.loads(formatter.format(record))

        assert entry["level"] == "WARNING"
        assert entry["logger"] == "git_ext_tree.sync.engine"
        assert entry["msg"] == "Merging abc"
        assert "ts" in entry
        assert "exc" not in entry

    def test_exception_included(self):
        formatter = JsonFormatter()
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(formatter.format(record))

        assert "RuntimeError: boom" in entry["exc"]
