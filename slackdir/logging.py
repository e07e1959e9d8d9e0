# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Logging configuration with Slack credential redaction.

Every API call carries the token in its query string, and the request
path is logged at debug level.  ``SecretFilter`` keeps tokens out of log
output in three ways: registered secrets, anything shaped like a Slack
token (``xoxb-...``), and the value of any ``token=`` query parameter.

Usage:
    # In entry points
    from slackdir.logging import configure_logging
    configure_logging(level=logging.INFO)

    # In library modules
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Looking up channel %s", name)
"""

import logging
import re
from typing import ClassVar


REDACTED = "[REDACTED]"

#: Slack bot, user, app, refresh and configuration tokens.
_SLACK_TOKEN_PATTERN = re.compile(r"\bxox[abposre]-[A-Za-z0-9-]+")

#: ``token=<value>`` inside a query string.
_TOKEN_PARAM_PATTERN = re.compile(r"(\btoken=)[^&\s]+")


class SecretFilter(logging.Filter):
    """Logging filter that redacts Slack credentials from log output.

    Secrets can be registered at runtime using ``register_secret()``;
    ``SlackDirectoryConfig`` registers its token on construction.

    Example:
        SecretFilter.register_secret("my-api-key-12345")
        handler.addFilter(SecretFilter())
        logger.info("GET /api/users.list?token=my-api-key-12345")
        # Output: "GET /api/users.list?token=[REDACTED]"
    """

    _secrets: ClassVar[set[str]] = set()
    _pattern: ClassVar[re.Pattern[str] | None] = None

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact secrets from the record's message and arguments.

        Args:
            record: The log record to filter.

        Returns:
            Always True (records are modified, never suppressed).
        """
        record.msg = self.redact(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self.redact(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True

    @classmethod
    def redact(cls, text: str) -> str:
        """Return *text* with all credentials replaced by ``[REDACTED]``."""
        if cls._pattern is not None:
            text = cls._pattern.sub(REDACTED, text)
        text = _SLACK_TOKEN_PATTERN.sub(REDACTED, text)
        return _TOKEN_PARAM_PATTERN.sub(rf"\g<1>{REDACTED}", text)

    @classmethod
    def register_secret(cls, secret: str) -> None:
        """Register a secret to be redacted from all log output.

        Args:
            secret: The secret string to redact. Empty strings are ignored.
        """
        if secret and secret not in cls._secrets:
            cls._secrets.add(secret)
            # Longest first so overlapping secrets redact completely.
            ordered = sorted(cls._secrets, key=len, reverse=True)
            escaped = [re.escape(s) for s in ordered]
            cls._pattern = re.compile("|".join(escaped))

    @classmethod
    def clear_secrets(cls) -> None:
        """Clear all registered secrets. Primarily for testing."""
        cls._secrets.clear()
        cls._pattern = None


def configure_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    add_secret_filter: bool = True,
) -> None:
    """Configure root logging for command-line use.

    Installs a single stream handler, replacing any existing ones.

    Args:
        level: The logging level (e.g., logging.INFO, logging.DEBUG).
        format_string: Custom format string. If None, uses default format.
        add_secret_filter: Whether to add the SecretFilter.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string))

    if add_secret_filter:
        handler.addFilter(SecretFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    root_logger.addHandler(handler)

    # slack_sdk logs full request URLs, token included, at debug level.
    logging.getLogger("slack_sdk").setLevel(max(level, logging.INFO))
