"""
FailureRecorder - append-only log of failed uploads.

One path per line, UTF-8. The file is created on the first failure and is
never truncated, so entries from earlier runs are kept.
"""
import logging
import os
import threading
from pathlib import Path
from typing import Union

from ..models import DEFAULT_ERROR_LOG

logger = logging.getLogger(__name__)


class FailureRecorder:
    """
    Records failed file paths to an error log.

    Implements IFailureRecorder protocol. Each record is a single write of a
    complete line made under a lock, so concurrent callers (coroutines or
    threads) never produce interleaved lines.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_ERROR_LOG):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._count = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def count(self) -> int:
        """Entries written by this recorder."""
        return self._count

    def record(self, file_path: str) -> None:
        line = f"{file_path}\n"
        with self._lock:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(line)
                f.flush()
                os.fsync(f.fileno())
            self._count += 1
        logger.debug("Recorded failure for %s in %s", file_path, self._path)
