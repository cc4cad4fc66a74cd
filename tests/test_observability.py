"""
Tests for logging configuration.
"""

import logging

from stackauto.core.observability.logging_config import (
    ENV_LOG_LEVEL,
    _parse_level,
    resolve_level,
    setup_logging,
)


class TestResolveLevel:
    def test_default(self):
        assert resolve_level() == "WARNING"

    def test_flags(self):
        assert resolve_level(debug=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_debug_beats_quiet(self):
        assert resolve_level(debug=True, quiet=True) == "DEBUG"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_LEVEL, "INFO")
        assert resolve_level() == "INFO"
        assert resolve_level(quiet=True) == "ERROR"


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_unknown_falls_back_to_warning(self):
        assert _parse_level("LOUD") == logging.WARNING
        assert _parse_level(None) == logging.WARNING
        assert _parse_level("") == logging.WARNING


class TestSetupLogging:
    def test_console_only(self, restore_logging):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO

    def test_replaces_handlers(self, restore_logging):
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(logging.getLogger().handlers) == 1

    def test_file_handler(self, restore_logging, tmp_path):
        log_file = tmp_path / "stackauto.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert len(root.handlers) == 2
        # root level drops to the most verbose handler
        assert root.level == logging.DEBUG

        logging.getLogger("stackauto.test").debug("file only")
        for h in root.handlers:
            h.flush()
        assert "file only" in log_file.read_text(encoding="utf-8")

    def test_file_level_defaults_to_console_level(self, restore_logging, tmp_path):
        setup_logging("ERROR", log_file=str(tmp_path / "x.log"))
        root = logging.getLogger()
        assert root.level == logging.ERROR
        assert all(h.level == logging.ERROR for h in root.handlers)
