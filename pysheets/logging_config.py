"""
Logging Configuration
Sets up the package logger. curses owns the terminal while the editor runs,
so records only go to a file, or nowhere.
"""
import logging
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'pysheets' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    logger = logging.getLogger("pysheets")
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    if not log_file:
        logger.addHandler(logging.NullHandler())
        logger.propagate = True
        return

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    logger.propagate = False

    logger.info("Logging initialized.")
