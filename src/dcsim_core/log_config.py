# --- src/dcsim_core/log_config.py ---
import logging
import sys
from typing import Union

# Third-party loggers that are too chatty at INFO for solver runs.
_NOISY_LOGGERS = ("pint", "matplotlib")


def setup_logging(level: Union[int, str] = logging.INFO, stream=None):
    """ Configures solver logging to stdout (or the given stream). """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    log_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"
    )
    root_logger = logging.getLogger()

    # Clear existing handlers so repeated calls never duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setFormatter(log_formatter)
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).debug("Logging configured at level %s.", logging.getLevelName(level))
