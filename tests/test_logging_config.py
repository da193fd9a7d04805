"""Tests for wildscapes/core/logging_config.py - unified logging configuration."""

import logging

from wildscapes.core.logging_config import (
    COMPACT_FORMAT,
    DEFAULT_FORMAT,
    DETAILED_FORMAT,
    STRUCTURED_FORMAT,
    LogContext,
    configure_third_party_loggers,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Test setup_logging function."""

    def test_returns_logger(self):
        logger = setup_logging("wildscapes_test_1")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "wildscapes_test_1"

    def test_logger_level_default(self):
        assert setup_logging("wildscapes_test_2").level == logging.INFO

    def test_logger_level_string(self):
        assert setup_logging("wildscapes_test_3", level="WARNING").level == logging.WARNING

    def test_idempotent_logger_creation(self):
        """Calling setup_logging twice must not add duplicate handlers."""
        logger1 = setup_logging("wildscapes_test_4")
        handler_count = len(logger1.handlers)
        logger2 = setup_logging("wildscapes_test_4", level=logging.DEBUG)
        assert logger1 is logger2
        assert len(logger2.handlers) == handler_count
        assert logger2.level == logging.DEBUG

    def test_console_handler_added(self):
        logger = setup_logging("wildscapes_test_5")
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    def test_console_handler_disabled(self):
        logger = setup_logging("wildscapes_test_6", console=False)
        assert logger.handlers == []

    def test_file_handler_with_log_file(self, tmp_path):
        log_file = tmp_path / "nested" / "engine.log"
        logger = setup_logging("wildscapes_test_7", log_file=log_file, console=False)
        logger.info("Test message")
        for handler in logger.handlers:
            handler.flush()
        assert "Test message" in log_file.read_text(encoding="utf-8")

    def test_file_handler_with_log_dir(self, tmp_path):
        setup_logging("wildscapes.test_8", log_dir=tmp_path, console=False)
        log_files = list(tmp_path.glob("wildscapes_test_8_*.log"))
        assert len(log_files) == 1

    def test_propagate(self):
        assert setup_logging("wildscapes_test_9").propagate is False
        assert setup_logging("wildscapes_test_10", propagate=True).propagate is True

    def test_unknown_format_uses_default(self):
        logger = setup_logging("wildscapes_test_11", format_style="nonexistent")
        assert logger.handlers[0].formatter._fmt == DEFAULT_FORMAT

    def test_structured_format_selected(self):
        logger = setup_logging("wildscapes_test_12", format_style="structured")
        assert logger.handlers[0].formatter._fmt == STRUCTURED_FORMAT


class TestGetLogger:
    def test_returns_same_logger(self):
        assert get_logger("wildscapes_get") is get_logger("wildscapes_get")


class TestConfigureThirdPartyLoggers:
    def test_quiets_noisy_packages(self):
        logging.getLogger("urllib3").setLevel(logging.NOTSET)
        configure_third_party_loggers(quiet=True)
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_verbose_packages_not_quieted(self):
        requests_logger = logging.getLogger("requests")
        requests_logger.setLevel(logging.INFO)
        configure_third_party_loggers(quiet=True, verbose_packages=["requests"])
        assert requests_logger.level == logging.INFO

    def test_quiet_false_leaves_levels(self):
        urllib3_logger = logging.getLogger("urllib3")
        urllib3_logger.setLevel(logging.DEBUG)
        configure_third_party_loggers(quiet=False)
        assert urllib3_logger.level == logging.DEBUG


class TestLogContext:
    def test_changes_level_temporarily(self):
        logger = setup_logging("wildscapes_ctx_1", level=logging.INFO)
        with LogContext(logger, logging.DEBUG) as ctx_logger:
            assert ctx_logger is logger
            assert logger.level == logging.DEBUG
        assert logger.level == logging.INFO

    def test_restores_level_on_exception(self):
        logger = setup_logging("wildscapes_ctx_2", level=logging.INFO)
        try:
            with LogContext(logger, "DEBUG"):
                raise ValueError("test")
        except ValueError:
            pass
        assert logger.level == logging.INFO


class TestFormatConstants:
    def test_default_format_has_required_fields(self):
        for field in ("%(asctime)s", "%(name)s", "%(levelname)s", "%(message)s"):
            assert field in DEFAULT_FORMAT

    def test_compact_format_is_shorter(self):
        assert len(COMPACT_FORMAT) < len(DEFAULT_FORMAT)

    def test_detailed_format_has_file_info(self):
        assert "%(filename)s" in DETAILED_FORMAT
        assert "%(lineno)d" in DETAILED_FORMAT

    def test_structured_format_is_json_like(self):
        assert STRUCTURED_FORMAT.startswith("{")
        assert STRUCTURED_FORMAT.endswith("}")
        assert '"message"' in STRUCTURED_FORMAT
