"""JSON logging configuration for credential resolution."""

import logging

from pythonjsonlogger import jsonlogger

# Context keys resolvers pass through ``extra=``; never certificate or key bytes
CONTEXT_FIELDS = frozenset({"strategy", "secret", "cluster", "field_path", "host"})


class CredentialJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter keeping core fields plus resolver context.

    Core fields: timestamp, level, message, exc_info, funcName, lineno.
    Context fields are only emitted when supplied through ``extra``.
    """

    allowed_fields = frozenset(
        {"timestamp", "level", "message", "exc_info", "funcName", "lineno"}
    ) | CONTEXT_FIELDS

    def add_fields(self, log_record, record, message_dict):
        """Populate the record, then drop everything outside the allowed set."""
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        for key in [key for key in log_record if key not in self.allowed_fields]:
            log_record.pop(key)


def _setup_logger() -> logging.Logger:
    """Initialize and configure singleton logger.

    Returns:
        Configured logger with CredentialJsonFormatter
    """
    logger = logging.getLogger("cluster_credentials")

    # Prevent duplicate handlers if module reloaded
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        CredentialJsonFormatter(
            fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
            timestamp=True,
        )
    )

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


LOGGER = _setup_logger()
