"""
Protocols (Interfaces) for Dependency Inversion.

The coordinator depends on these instead of concrete HTTP or file classes.
"""
from typing import Protocol, runtime_checkable

from .models import UploadOutcome


@runtime_checkable
class IUploadClient(Protocol):
    """Interface for single-file uploads."""

    async def upload(self, file_path: str) -> UploadOutcome:
        """Upload one file and classify the result. Must not raise per-file errors."""
        ...


@runtime_checkable
class IFailureRecorder(Protocol):
    """Interface for persisting failed paths."""

    def record(self, file_path: str) -> None:
        """Append a failed path."""
        ...
