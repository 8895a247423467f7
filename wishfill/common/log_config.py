"""
Logging Configuration

Configures the ``wishfill`` logger for the CLI. Output goes to stderr to
keep stdout clean for the extraction report.

In verbose mode urllib3 connection logs (redirects, retries) are routed
through the same handler. Those include full request URLs, so the handler
masks the rendering proxy ``api_key`` query value in every record.
"""

import logging
import re
import sys

LOGGER_NAME = "wishfill"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

# Transport loggers shown with --verbose
VERBOSE_TRANSPORT_LOGGERS = ("urllib3",)

_API_KEY = re.compile(r"(api_key=)[^&\s\"']+")


class RedactApiKeyFilter(logging.Filter):
    """Replace api_key query values with '***' in formatted messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _API_KEY.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set level to DEBUG and show transport logs
        quiet: If True, set level to WARNING
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RedactApiKeyFilter())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers if called multiple times
    logger.handlers.clear()
    logger.addHandler(handler)

    for name in VERBOSE_TRANSPORT_LOGGERS:
        transport = logging.getLogger(name)
        transport.handlers.clear()
        if verbose:
            transport.setLevel(logging.DEBUG)
            transport.addHandler(handler)
            transport.propagate = False
        else:
            transport.setLevel(logging.NOTSET)
            transport.propagate = True
