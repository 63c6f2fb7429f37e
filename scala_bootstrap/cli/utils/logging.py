import logging
import sys


logger = logging.getLogger("scala_bootstrap")


def configure_logging(debug: bool):
    """
    Configures the package logger based on the debug flag.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
