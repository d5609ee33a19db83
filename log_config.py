"""Logging configuration with secret redaction.

Usage:
    # In entry points
    from log_config import configure_logging
    configure_logging(level=logging.INFO, secrets=[secret_key])

    # In library modules
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Calling %s", url)

Logs go to stderr; stdout carries the MCP stdio protocol.
"""

import logging
import re
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class SecretFilter(logging.Filter):
    """Logging filter that replaces registered secrets with '[REDACTED]'."""

    _secrets = set()
    _pattern = None

    def filter(self, record):
        if self._pattern is not None:
            record.msg = self._redact(str(record.msg))
            if isinstance(record.args, dict):
                record.args = {key: self._redact(value) for key, value in record.args.items()}
            elif record.args:
                record.args = tuple(self._redact(arg) for arg in record.args)
        return True

    def _redact(self, value):
        if isinstance(value, str):
            return self._pattern.sub("[REDACTED]", value)
        return value

    @classmethod
    def register_secret(cls, secret):
        """Register a secret. Empty strings are ignored."""
        if secret:
            cls._secrets.add(secret)
            cls._rebuild_pattern()

    @classmethod
    def clear_secrets(cls):
        """Clear all registered secrets. Primarily for testing."""
        cls._secrets.clear()
        cls._pattern = None

    @classmethod
    def _rebuild_pattern(cls):
        # Longest first so a secret containing another is redacted whole
        ordered = sorted(cls._secrets, key=len, reverse=True)
        cls._pattern = re.compile("|".join(re.escape(s) for s in ordered))


def configure_logging(level=logging.INFO, secrets=None):
    """Configure root logging to stderr with secret redaction.

    Args:
        level: Logging level or level name.
        secrets: Values to redact from every log record.
    """
    for secret in secrets or []:
        SecretFilter.register_secret(secret)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(SecretFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
