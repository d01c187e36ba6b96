"""
Logging setup for crawler runs.

It includes:
- 'configure_logging': console logging for the whole process.
- 'run_file_logger': a context manager that temporarily attaches a
  'FileHandler' to the root logger for the duration of a run.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Generator, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stdout with the pipeline format."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@contextmanager
def run_file_logger(
    log_path: Optional[str], level: int = logging.INFO
) -> Generator[Optional[logging.Handler], None, None]:
    """
    Attach a file handler to the root logger while the block runs.
    The handler is always removed and closed, even if the run fails.
    Passing None disables file logging.
    """
    if not log_path:
        yield None
        return

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger = logging.getLogger()
    previous_level = root_logger.level
    if previous_level > level:
        root_logger.setLevel(level)
    root_logger.addHandler(handler)
    try:
        yield handler
    finally:
        root_logger.removeHandler(handler)
        root_logger.setLevel(previous_level)
        handler.close()
