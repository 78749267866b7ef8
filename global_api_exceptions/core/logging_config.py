import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marks root handlers installed by setup_logging
_INSTALLED_ATTR = "_global_api_exceptions_handler"


def remove_logging_handlers():
    """Detach and close the root handlers added by ``setup_logging``"""
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _INSTALLED_ATTR, False)]:
        root.removeHandler(handler)
        handler.close()


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure application-wide logging.

    Handlers from a previous call are replaced; handlers installed by
    anything else (the server, the test runner) are left in place.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a file that receives a copy of the log
    """

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    # Configure root logger
    remove_logging_handlers()
    root = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _INSTALLED_ATTR, True)
        root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))

    # Set specific log levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # Create logger for the package
    logger = logging.getLogger("global_api_exceptions")
    logger.setLevel(getattr(logging, log_level.upper()))

    return logger
