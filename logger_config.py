import logging
import os

LOGGER_NAME = "RestaurantOrderLogger"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logger(log_file: str = "restaurant_tools.log", log_to_console: bool = True) -> logging.Logger:
    """
    Sets up the restaurant logger to record logs to a file with UTF-8 encoding.

    Args:
        log_file (str): Path to the log file.
        log_to_console (bool): If True, also log to console (stderr).

    Returns:
        logging.Logger: Configured logger instance.
    """
    log_directory = os.path.dirname(log_file)
    if log_directory and not os.path.exists(log_directory):
        os.makedirs(log_directory, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    # Reset handlers to keep behavior predictable across repeated setups
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)
    fh.setFormatter(formatter)
    logger.addHandler(fh)

    if log_to_console:
        # stderr only: stdout belongs to the conversation
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    return logger


def get_logger() -> logging.Logger:
    """Return the shared logger, silent until setup_logger() is called."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger
