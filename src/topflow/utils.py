import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("topflow")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(logging.WARNING)


def set_log_level(level: int | str) -> None:
    """Sets the level of the package logger (e.g. logging.DEBUG or "INFO")."""
    logger.setLevel(level)
