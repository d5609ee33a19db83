"""Tests for logging configuration in log_config.py."""

import logging

import pytest

from log_config import SecretFilter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging changes to the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(logging.NOTSET)


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestSecretFilter:
    """Tests for SecretFilter."""

    def test_redacts_message_and_args(self) -> None:
        SecretFilter.register_secret("s3cr3t")
        record = _record("key=s3cr3t user=%s", "s3cr3t-owner")
        assert SecretFilter().filter(record) is True
        assert record.msg == "key=[REDACTED] user=%s"
        assert record.args == ("[REDACTED]-owner",)

    def test_non_string_args_untouched(self) -> None:
        SecretFilter.register_secret("s3cr3t")
        record = _record("count=%d", 3)
        SecretFilter().filter(record)
        assert record.args == (3,)

    def test_mapping_args_kept_as_mapping(self) -> None:
        """Named-placeholder arguments still format after redaction."""
        SecretFilter.register_secret("s3cr3t")
        record = _record("key=%(key)s n=%(n)d", {"key": "s3cr3t", "n": 2})
        SecretFilter().filter(record)
        assert record.args == {"key": "[REDACTED]", "n": 2}
        assert record.getMessage() == "key=[REDACTED] n=2"

    def test_empty_secret_ignored(self) -> None:
        SecretFilter.register_secret("")
        record = _record("nothing to hide")
        SecretFilter().filter(record)
        assert record.msg == "nothing to hide"

    def test_longer_secret_redacted_whole(self) -> None:
        SecretFilter.register_secret("abc")
        SecretFilter.register_secret("abcdef")
        record = _record("abcdef")
        SecretFilter().filter(record)
        assert record.msg == "[REDACTED]"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_output_redacted(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.INFO, secrets=["SK-value"])
        logging.getLogger("jimengpic.test").info("signing with %s", "SK-value")
        err = capsys.readouterr().err
        assert "signing with [REDACTED]" in err
        assert "SK-value" not in err

    def test_level_name_accepted(self) -> None:
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
