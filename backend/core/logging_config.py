"""Logging setup shared by the prediction API, model loaders and tests."""

import logging


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Install the service log format on the root logger unless handlers already exist.

    Test runners and uvicorn may configure logging first; in that case their
    handlers are left untouched.
    """
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger(name: str) -> logging.Logger:
    """Return the named logger used by a service module."""
    return logging.getLogger(name)
