"""
Per-component log files for the fuzzy logic system.

Every pipeline stage logs through its own named logger. setup_logging()
routes each of them to `<log_dir>/<name>.log` and stamps every record with
the index of the evaluation that produced it, so the files of one run can be
lined up side by side.
"""

import glob
import logging
import os
from contextvars import ContextVar

_EVAL_I = ContextVar("evaluation_i", default=-1)

LOGGER_NAMES = [
    "main",
    "system",
    "fuzzifier",
    "rule_base",
    "inference",
    "defuzzifier",
    "config",
    "profiler",
]


def set_evaluation_index(i: int) -> None:
    _EVAL_I.set(int(i))


def get_evaluation_index() -> int:
    return _EVAL_I.get()


class EvaluationIndexFilter(logging.Filter):
    """Copies the current evaluation index onto each record as ``record.i``."""

    def filter(self, record):
        record.i = _EVAL_I.get()
        return True


LOG_FORMAT = "%(i)06d | %(levelname)s | %(name)s | %(message)s"


def _indexed(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    handler.addFilter(EvaluationIndexFilter())
    return handler


def _remove_rotated(log_dir: str) -> list:
    """Deletes leftover ``*.log.N`` files; returns the paths that could not be removed."""
    failed = []
    for path in glob.glob(os.path.join(log_dir, "*.log.*")):
        try:
            os.remove(path)
        except OSError:
            failed.append(path)
    return failed


def setup_logging(
    log_dir: str = "logs",
    overwrite: bool = True,
    log_level: int = logging.DEBUG,
    console_level: int = logging.INFO,
    cleanup_rotated: bool = True,
) -> None:
    """
    Routes every component logger to its own file under ``log_dir``.

    Args:
        log_dir (str): Directory for the ``<component>.log`` files.
        overwrite (bool): Truncate existing files instead of appending.
        log_level (int): Level for the component loggers and their files.
        console_level (int): Level for the console handler on "main".
        cleanup_rotated (bool): Delete rotated ``*.log.N`` leftovers first.
    """
    os.makedirs(log_dir, exist_ok=True)
    stale = _remove_rotated(log_dir) if cleanup_rotated else []

    mode = "w" if overwrite else "a"
    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        log.setLevel(log_level)
        log.propagate = False
        for h in list(log.handlers):
            log.removeHandler(h)
            h.close()

        path = os.path.join(log_dir, f"{name}.log")
        log.addHandler(_indexed(logging.FileHandler(path, mode=mode, encoding="utf-8"), log_level))

    main_log = logging.getLogger("main")
    main_log.addHandler(_indexed(logging.StreamHandler(), console_level))
    main_log.info("Logging system initialized in '%s'.", log_dir)
    for path in stale:
        main_log.warning("Could not remove rotated log file '%s'.", path)
