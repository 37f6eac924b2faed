"""
cryptorand logging.

Library modules log through get_logger() and never configure handlers;
the CLI calls setup_logging() when asked to be verbose.
"""

import logging

FORMAT = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under 'cryptorand'."""
    return logging.getLogger(f'cryptorand.{name}')


def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure the cryptorand root logger.

    Calling it again only changes the level and adds the file handler.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for file logging
    """
    logger = logging.getLogger('cryptorand')
    logger.setLevel(level)

    fmt = logging.Formatter(FORMAT)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
