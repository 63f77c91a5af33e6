"""Logging setup for the interactive driver; library modules only create loggers"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)s - %(message)s"


def setup_loggers(def_level: int = logging.WARNING, log_fname: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger("calculator")
    logger.setLevel(logging.DEBUG)
    # repeated setup (e.g. main() called twice in one process) replaces handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    sh = logging.StreamHandler()
    sh.setLevel(def_level)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    if log_fname is not None:
        fh = logging.FileHandler(log_fname)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger
