import logging
import os
import sys
from logging import Filter
from os import PathLike
from typing import Optional, Set, Union


class CorefScoreLogger(logging.Logger):
    """
    Adds `debug_once`, `info_once` and `warning_once`, which log a given message only the
    first time they see it. Used for notices that would otherwise repeat for every document.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._seen_msgs: Set[str] = set()

    def _log_once(self, level: int, msg: str, *args, **kwargs) -> None:
        if msg in self._seen_msgs:
            return
        self._seen_msgs.add(msg)
        # attribute the record to the caller of the *_once method
        kwargs.setdefault("stacklevel", 3)
        self.log(level, msg, *args, **kwargs)

    def debug_once(self, msg: str, *args, **kwargs) -> None:
        self._log_once(logging.DEBUG, msg, *args, **kwargs)

    def info_once(self, msg: str, *args, **kwargs) -> None:
        self._log_once(logging.INFO, msg, *args, **kwargs)

    def warning_once(self, msg: str, *args, **kwargs) -> None:
        self._log_once(logging.WARNING, msg, *args, **kwargs)


logging.setLoggerClass(CorefScoreLogger)
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class ErrorFilter(Filter):
    """
    Lets through records below ERROR, for the stdout handler. ERROR and above go to stderr
    only.
    """

    def filter(self, record):
        return record.levelno < logging.ERROR


def level_from_environment() -> int:
    """
    `COREFSCORE_DEBUG` forces DEBUG; otherwise `COREFSCORE_LOG_LEVEL` names the level,
    defaulting to INFO.
    """
    if os.environ.get("COREFSCORE_DEBUG"):
        return logging.DEBUG
    level_name = os.environ.get("COREFSCORE_LOG_LEVEL", "INFO")
    return logging._nameToLevel.get(level_name, logging.INFO)


def prepare_global_logging(serialization_dir: Optional[Union[str, PathLike]] = None) -> None:
    """
    Sends INFO and below to stdout, ERROR and above to stderr, and everything to
    `serialization_dir/out.log` when a directory is given.
    """
    root_logger = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)
    level = level_from_environment()

    # replace handlers from earlier calls so nothing is logged twice
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(ErrorFilter())
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.ERROR)

    root_logger.setLevel(level)
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    if serialization_dir is not None:
        os.makedirs(serialization_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(serialization_dir, "out.log"))
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)
