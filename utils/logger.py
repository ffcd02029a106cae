import logging
import sys

LOGGER_NAME = "stilllife"


def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure the 'stilllife' logger namespace.

    Every module logs through a child of this logger (see get_logger), so a
    single call at startup controls the whole application.

    Args:
        level (int): Logging level (e.g. logging.DEBUG, logging.INFO).
        log_file (str): Optional path to also write the log to.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers when setup is called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name):
    """
    Return a child logger of the application namespace, e.g. 'stilllife.texture_registry'.
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
