"""
Logging setup for the simulator.

All modules log under the "deepwitness" logger hierarchy, e.g.
"deepwitness.game_engine", so the host (Streamlit, a test harness) can
route or silence them in one place.
"""
import logging
import os
from typing import Optional

ROOT_LOGGER = "deepwitness"

_HANDLER_TAG = "_deepwitness_handler"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the "deepwitness" logger with a console handler and an optional file handler.

    Streamlit re-executes the app script on every interaction, so handlers
    installed by a previous run are replaced rather than duplicated.

    Args:
        level: Logging level name, e.g. "DEBUG" or "INFO"
        log_file: Optional path of a log file; its directory is created if needed

    Returns:
        The configured "deepwitness" logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    setattr(console_handler, _HANDLER_TAG, True)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
        setattr(file_handler, _HANDLER_TAG, True)
        logger.addHandler(file_handler)

    return logger
