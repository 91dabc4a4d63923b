"""Services for bulk_uploader."""
from .api_client import HTTPUploadClient
from .error_log import FailureRecorder

__all__ = [
    "HTTPUploadClient",
    "FailureRecorder",
]
