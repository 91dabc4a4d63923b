"""Orchestrator package - coordinates batched directory uploads."""
from .core import BatchUploadRun
from .file_collector import (
    DirectoryNotFound,
    FileCollector,
    PermissionDenied,
    SourceDirectoryError,
)
from .limiter import ConcurrencyLimiter
from .models import RunState, RunSummary

__all__ = [
    "BatchUploadRun",
    "ConcurrencyLimiter",
    "DirectoryNotFound",
    "FileCollector",
    "PermissionDenied",
    "RunState",
    "RunSummary",
    "SourceDirectoryError",
]
