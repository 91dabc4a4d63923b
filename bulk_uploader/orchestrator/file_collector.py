"""File collection utilities for directory uploads."""
import logging
import os
from itertools import islice
from typing import Iterable, Iterator, List, TypeVar

from ..models import UploadTarget

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SourceDirectoryError(RuntimeError):
    """Raised when the source directory cannot be enumerated."""


class DirectoryNotFound(SourceDirectoryError):
    """Source directory does not exist or is not a directory."""


class PermissionDenied(SourceDirectoryError):
    """Source directory exists but cannot be opened."""


class FileCollector:
    """Collects upload targets from a source directory."""

    @staticmethod
    def iter_files(folder: str) -> Iterator[UploadTarget]:
        """
        Lazily enumerate regular files directly under ``folder``.

        The directory is opened before returning so that a missing or
        unreadable directory fails here, not on the first ``next()``.
        Order is whatever the directory listing yields.

        Raises:
            DirectoryNotFound: folder is missing or not a directory
            PermissionDenied: folder cannot be opened
        """
        folder = os.fspath(folder)
        try:
            entries = os.scandir(folder)
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise DirectoryNotFound(f"source directory not found: {folder}") from exc
        except PermissionError as exc:
            raise PermissionDenied(f"permission denied opening source directory: {folder}") from exc

        return FileCollector._scan(folder, entries)

    @staticmethod
    def _scan(folder: str, entries) -> Iterator[UploadTarget]:
        with entries:
            for entry in entries:
                try:
                    # follows symlinks: links to directories and dangling links are skipped
                    if not entry.is_file():
                        continue
                except OSError as exc:
                    logger.warning("Skipping %s: %s", entry.name, exc)
                    continue
                yield UploadTarget(os.path.join(folder, entry.name))

    @staticmethod
    def batched(items: Iterable[T], size: int) -> Iterator[List[T]]:
        """
        Group items into consecutive lists of ``size`` (last one may be shorter).

        Pulls lazily, so at most one batch is held in memory.
        """
        if size < 1:
            raise ValueError(f"batch size must be >= 1, got {size}")
        iterator = iter(items)
        while True:
            batch = list(islice(iterator, size))
            if not batch:
                return
            yield batch
