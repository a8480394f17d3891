"""
alsversions logger.
"""
import logging
import sys


def setup_logger(verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("alsversions")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(message)s'))  # plain CLI output
        logger.addHandler(handler)

    return logger


logger = setup_logger()

__all__ = ["logger", "setup_logger"]
