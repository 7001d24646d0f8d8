import logging
from logging import Filter
import os
from os import PathLike
from typing import Union

import sys


class AmrGenLogger(logging.Logger):
    """
    A `logging.Logger` that remembers the messages it has emitted, so that
    `{debug,info,warning,error}_once()` report a recurring condition (e.g. an unrealizable
    concept) a single time per process.
    """

    def __init__(self, name):
        super().__init__(name)
        self._seen_msgs = set()

    def debug_once(self, msg, *args, **kwargs):
        if msg not in self._seen_msgs:
            self.debug(msg, *args, **kwargs)
            self._seen_msgs.add(msg)

    def info_once(self, msg, *args, **kwargs):
        if msg not in self._seen_msgs:
            self.info(msg, *args, **kwargs)
            self._seen_msgs.add(msg)

    def warning_once(self, msg, *args, **kwargs):
        if msg not in self._seen_msgs:
            self.warning(msg, *args, **kwargs)
            self._seen_msgs.add(msg)

    def error_once(self, msg, *args, **kwargs):
        if msg not in self._seen_msgs:
            self.error(msg, *args, **kwargs)
            self._seen_msgs.add(msg)


logging.setLoggerClass(AmrGenLogger)
logger = logging.getLogger(__name__)


FILE_FRIENDLY_LOGGING: bool = False
"""
When `True`, progress bars write one line per update and refresh at most every
2 seconds, which keeps log files readable.
"""


class ErrorFilter(Filter):
    """
    Drops records at ERROR or above.  Installed on the stdout handler so that errors, which
    also go to stderr, are not printed twice.
    """

    def filter(self, record):
        return record.levelno < logging.ERROR


def prepare_global_logging(serialization_dir: Union[str, PathLike]) -> None:
    """
    Sends all logging to `serialization_dir/out.log` as well as to stdout and stderr.  The
    level is DEBUG when `AMRGEN_DEBUG` is set, else `AMRGEN_LOG_LEVEL` (default INFO).
    """
    root_logger = logging.getLogger()

    log_file = os.path.join(serialization_dir, "out.log")
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    file_handler = logging.FileHandler(log_file)
    stdout_handler = logging.StreamHandler(sys.stdout)
    stderr_handler = logging.StreamHandler(sys.stderr)

    handler: logging.Handler
    for handler in [file_handler, stdout_handler, stderr_handler]:
        handler.setFormatter(formatter)

    # Otherwise every message shows up twice.
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if os.environ.get("AMRGEN_DEBUG"):
        level = logging.DEBUG
    else:
        level_name = os.environ.get("AMRGEN_LOG_LEVEL")
        level = logging._nameToLevel.get(level_name, logging.INFO)

    file_handler.setLevel(level)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(ErrorFilter())
    stderr_handler.setLevel(logging.ERROR)
    root_logger.setLevel(level)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    def excepthook(exctype, value, traceback):
        if issubclass(exctype, KeyboardInterrupt):
            sys.__excepthook__(exctype, value, traceback)
            return
        root_logger.critical("Uncaught exception", exc_info=(exctype, value, traceback))

    sys.excepthook = excepthook

    from amrgen.common.tqdm import logger as tqdm_logger

    tqdm_logger.addHandler(file_handler)
