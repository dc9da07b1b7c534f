"""Logging for the bugmap command.

Progress goes through the ``bugmap`` logger hierarchy (bugmap.walker,
bugmap.resolver, bugmap.document, ...) at the configured level. Third-party
loggers stay at WARNING.

Each API request is logged by bugmap.adapters.github at DEBUG. Requests are
shown when the level is DEBUG or logging.log_requests is set; the latter
also turns on urllib3 connection logging.

Configure via config.yaml (logging.level, logging.format, logging.log_requests)
or env (LOGGING_LEVEL, LOGGING_FORMAT, LOGGING_LOG_REQUESTS).
"""

import logging

from bugmap.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

APP_LOGGER = "bugmap"
REQUEST_LOGGER = "bugmap.adapters.github"
TRANSPORT_LOGGER = "urllib3"


def resolve_level(level: str) -> int:
    """Map level name to logging constant, INFO if unknown."""
    return LEVELS.get(level.upper().strip(), logging.INFO)


class BugmapLogging:
    """Applies LoggingConfig to the bugmap loggers."""

    def __init__(self, config: LoggingConfig) -> None:
        self._level = resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT
        self._log_requests = config.log_requests

    def setup(self) -> logging.Logger:
        """Install the root handler and set levels; returns the ``bugmap`` logger."""
        logging.basicConfig(level=logging.WARNING, format=self._format, force=True)

        app = logging.getLogger(APP_LOGGER)
        app.setLevel(self._level)

        show_requests = self._log_requests or self._level == logging.DEBUG
        logging.getLogger(REQUEST_LOGGER).setLevel(
            logging.DEBUG if show_requests else max(self._level, logging.INFO)
        )
        logging.getLogger(TRANSPORT_LOGGER).setLevel(logging.DEBUG if self._log_requests else logging.WARNING)
        return app
