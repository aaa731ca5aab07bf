import logging
import os
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

from .ui import console

LOGGER_NAME = "dotstrap"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def setup_logger(log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configure the shared logger.

    INFO and above go to the console through rich. When a log file is
    given, everything down to DEBUG (including streamed command output)
    is also written there as a plain-text transcript.
    """
    logger = get_logger()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    console_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(logging.INFO)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
            logger.addHandler(file_handler)
            os.chmod(str(log_path), 0o600)
        except OSError as e:
            logger.warning(f"Could not set up file logging to {log_path}: {e}")
    return logger
