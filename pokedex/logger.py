"""
Logging setup for the Pokédex service
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Safe to call more than once; the handler is only added the first time.
    """
    logger = logging.getLogger("pokedex")
    logger.setLevel(level)

    if not any(h.get_name() == "pokedex" for h in logger.handlers):
        log_handler = logging.StreamHandler()
        log_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        log_handler.set_name("pokedex")
        logger.addHandler(log_handler)

    return logger
