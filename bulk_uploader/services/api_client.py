"""HTTP adapter that streams files to the upload endpoint."""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, BinaryIO, Optional

import httpx

from ..models import DEFAULT_LABEL, DEFAULT_TIMEOUT, UploadOutcome

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


async def _stream_file(handle: BinaryIO, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield file chunks, reading in a worker thread so the loop never blocks."""
    try:
        while True:
            chunk = await asyncio.to_thread(handle.read, chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        handle.close()


class HTTPUploadClient:
    """
    Streams one file per request to a fixed endpoint.

    Implements IUploadClient protocol.

    Usage:
        async with HTTPUploadClient(url, label="sbom") as client:
            outcome = await client.upload("/data/doc.json")
    """

    def __init__(
        self,
        endpoint_url: str,
        label: str = DEFAULT_LABEL,
        timeout: float = DEFAULT_TIMEOUT,
        max_connections: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._endpoint_url = endpoint_url
        self._label = label
        self._timeout = timeout
        self._max_connections = max_connections
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        limits = httpx.Limits(
            max_connections=self._max_connections,
            max_keepalive_connections=self._max_connections,
        )
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            limits=limits,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def upload(self, file_path: str) -> UploadOutcome:
        """
        POST the file's bytes to ``{endpoint}?labels={label}``.

        Every failure (unreadable file, transport error, timeout, non-2xx
        status) is returned as a failed outcome; this method does not raise
        for per-file problems.
        """
        if not self._client:
            raise RuntimeError("HTTPUploadClient not initialized. Use 'async with' context.")

        try:
            handle = open(file_path, "rb")
        except OSError as exc:
            return UploadOutcome.fail(file_path, _describe(exc))

        logger.debug("Uploading %s", file_path)
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self._endpoint_url,
                    params={"labels": self._label},
                    content=_stream_file(handle),
                    headers={"Content-Type": "application/json"},
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            return UploadOutcome.fail(file_path, f"timeout of {self._timeout:g}s exceeded")
        except Exception as exc:
            return UploadOutcome.fail(file_path, _describe(exc))
        finally:
            handle.close()

        if not response.is_success:
            return UploadOutcome.fail(
                file_path,
                f"HTTP {response.status_code} {response.reason_phrase}".rstrip(),
                status_code=response.status_code,
            )
        return UploadOutcome.ok(file_path, response.status_code)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
