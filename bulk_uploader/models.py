"""
Models for bulk_uploader.

Immutable dataclasses shared by the enumerator, worker and coordinator.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


DEFAULT_CONCURRENCY = 4
DEFAULT_BATCH_SIZE = 200
DEFAULT_LABEL = "aaa"
DEFAULT_ERROR_LOG = "errors.log"
DEFAULT_TIMEOUT = 30.0


class UploadStatus(Enum):
    """Upload attempt status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadTarget:
    """A single file queued for upload."""
    file_path: str


@dataclass(frozen=True)
class UploadOutcome:
    """Immutable result of one upload attempt."""
    file_path: str
    status: UploadStatus = UploadStatus.SUCCESS
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @classmethod
    def ok(cls, file_path: str, status_code: int):
        return cls(
            file_path=file_path,
            status=UploadStatus.SUCCESS,
            status_code=status_code,
        )

    @classmethod
    def fail(cls, file_path: str, error: str, status_code: Optional[int] = None):
        return cls(
            file_path=file_path,
            status=UploadStatus.FAILED,
            status_code=status_code,
            error=error,
        )


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for one upload run."""
    endpoint_url: str
    source_dir: str
    concurrency: int = DEFAULT_CONCURRENCY
    batch_size: int = DEFAULT_BATCH_SIZE
    label: str = DEFAULT_LABEL
    error_log_path: str = DEFAULT_ERROR_LOG
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if not self.endpoint_url:
            raise ValueError("endpoint_url is required")
        if not self.source_dir:
            raise ValueError("source_dir is required")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")
