"""
bulk_uploader - stream every file of a directory to an HTTP endpoint.

Files are uploaded in fixed-size batches; inside a batch at most N uploads
are in flight. Failed paths are appended to an error log so they can be
re-driven later.

Usage:
    from bulk_uploader import BatchUploadRun, HTTPUploadClient, RunConfig

    config = RunConfig(
        endpoint_url="http://localhost:8080/api/v2/sbom",
        source_dir="/data/sbom",
        concurrency=10,
        batch_size=700,
    )
    async with HTTPUploadClient(config.endpoint_url, label=config.label) as client:
        summary = await BatchUploadRun(config, client).run()
"""
from .models import RunConfig, UploadOutcome, UploadStatus, UploadTarget
from .orchestrator import (
    BatchUploadRun,
    ConcurrencyLimiter,
    DirectoryNotFound,
    FileCollector,
    PermissionDenied,
    RunState,
    RunSummary,
    SourceDirectoryError,
)
from .services import FailureRecorder, HTTPUploadClient

__version__ = "0.1.0"
__all__ = [
    # Main
    "BatchUploadRun",
    "RunSummary",
    "RunState",
    # Models
    "RunConfig",
    "UploadOutcome",
    "UploadStatus",
    "UploadTarget",
    # Pipeline pieces
    "ConcurrencyLimiter",
    "FileCollector",
    # Services
    "HTTPUploadClient",
    "FailureRecorder",
    # Errors
    "SourceDirectoryError",
    "DirectoryNotFound",
    "PermissionDenied",
]
