"""
Tests for observability — console markers and log setup.
"""

import logging

from passwall_installer.core.observability.logging_config import (
    MarkerFormatter,
    _parse_level,
    setup_logging,
)


def _record(level, msg="Installing xray-core..."):
    return logging.LogRecord("passwall", level, __file__, 1, msg, None, None)


class TestMarkerFormatter:
    def test_plain_markers(self):
        fmt = MarkerFormatter("%(marker)s %(message)s", color=False)
        assert fmt.format(_record(logging.INFO)) == "[INFO] Installing xray-core..."
        assert fmt.format(_record(logging.WARNING)).startswith("[WARN] ")
        assert fmt.format(_record(logging.ERROR)).startswith("[ERRO] ")
        assert fmt.format(_record(logging.CRITICAL)).startswith("[ERRO] ")
        assert fmt.format(_record(logging.DEBUG)).startswith("[DEBG] ")

    def test_colored_marker(self):
        fmt = MarkerFormatter("%(marker)s %(message)s", color=True)
        line = fmt.format(_record(logging.ERROR))
        assert "\x1b[" in line
        assert "[ERRO]" in line


class TestSetupLogging:
    def test_parse_level(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("bogus") == logging.INFO
        assert _parse_level(None) == logging.INFO

    def test_console_level(self):
        setup_logging("WARNING", color=False)
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "install.log"
        setup_logging("INFO", log_file=str(log_file), log_file_level="DEBUG", color=False)
        root = logging.getLogger()
        assert root.level == logging.DEBUG

        logging.getLogger("passwall_installer.test").debug("only in the file")
        for handler in root.handlers:
            handler.flush()
        assert "only in the file" in log_file.read_text()
