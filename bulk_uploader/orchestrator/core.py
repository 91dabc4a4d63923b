"""Core orchestrator - drives a batched directory upload."""
import asyncio
import logging
from typing import Any, Callable, List, Optional

from ..models import RunConfig, UploadOutcome, UploadTarget
from ..protocols import IFailureRecorder, IUploadClient
from ..services.error_log import FailureRecorder
from ..utils.events import BatchProgress, EventEmitter
from .file_collector import FileCollector, SourceDirectoryError
from .limiter import ConcurrencyLimiter
from .models import RunState, RunSummary

logger = logging.getLogger(__name__)


class BatchUploadRun:
    """
    Uploads every file of a directory, one batch at a time.

    Batches are processed strictly in order: every upload of batch K settles
    before batch K+1 is pulled from the directory. Inside a batch, uploads run
    through the limiter, so at most ``config.concurrency`` are in flight.

    Usage:
        async with HTTPUploadClient(config.endpoint_url) as client:
            run = BatchUploadRun(config, client)
            run.on_file_complete(lambda outcome: print(outcome.status_code))
            summary = await run.run()
    """

    def __init__(
        self,
        config: RunConfig,
        client: IUploadClient,
        recorder: Optional[IFailureRecorder] = None,
        limiter: Optional[ConcurrencyLimiter] = None,
    ):
        self._config = config
        self._client = client
        self._recorder = recorder or FailureRecorder(config.error_log_path)
        self._limiter = limiter or ConcurrencyLimiter(config.concurrency)
        self._events = EventEmitter()
        self._state = RunState.IDLE
        self._stats = {"total_files": 0, "uploaded": 0, "failed": 0, "batches": 0}

    @property
    def state(self) -> RunState:
        return self._state

    # Event subscription methods
    def on_batch_start(self, callback: Callable[[int, int], Any]):
        """Called before a batch is submitted. Receives (batch_index, size)."""
        self._events.on("batch_start", callback)

    def on_batch_complete(self, callback: Callable[[BatchProgress], Any]):
        """Called once every upload of a batch has settled."""
        self._events.on("batch_complete", callback)

    def on_file_complete(self, callback: Callable[[UploadOutcome], Any]):
        """Called when a file uploads successfully."""
        self._events.on("file_complete", callback)

    def on_file_fail(self, callback: Callable[[UploadOutcome], Any]):
        """Called when a file upload fails, after it was recorded."""
        self._events.on("file_fail", callback)

    def on_finish(self, callback: Callable[[RunSummary], Any]):
        """Called with the final summary."""
        self._events.on("finish", callback)

    def on_error(self, callback: Callable[[Exception], Any]):
        """Called when the run aborts."""
        self._events.on("error", callback)

    async def run(self) -> RunSummary:
        """
        Execute the run.

        Raises:
            SourceDirectoryError: the source directory cannot be opened;
                nothing has been uploaded at that point.
            OSError: a failure could not be written to the error log; raised
                once every upload of the current batch has settled.
        """
        if self._state != RunState.IDLE:
            raise RuntimeError(f"run already started (state={self._state.value})")

        self._state = RunState.ENUMERATING
        try:
            targets = FileCollector.iter_files(self._config.source_dir)
        except SourceDirectoryError as exc:
            self._state = RunState.FAILED
            logger.error("Cannot enumerate %s: %s", self._config.source_dir, exc)
            await self._events.emit("error", exc)
            raise

        logger.info(
            "Uploading %s to %s (concurrency=%d, batch size=%d)",
            self._config.source_dir,
            self._config.endpoint_url,
            self._config.concurrency,
            self._config.batch_size,
        )

        for index, batch in enumerate(
            FileCollector.batched(targets, self._config.batch_size), 1
        ):
            if len(batch) < self._config.batch_size:
                self._state = RunState.DRAINING
            else:
                self._state = RunState.BATCH_IN_FLIGHT
            await self._process_batch(index, batch)
            self._state = RunState.ENUMERATING

        self._state = RunState.DONE
        if self._stats["total_files"] == 0:
            logger.info("No files to upload in %s", self._config.source_dir)

        summary = RunSummary(
            total_files=self._stats["total_files"],
            uploaded_files=self._stats["uploaded"],
            failed_files=self._stats["failed"],
            batches=self._stats["batches"],
            error_log_path=str(self._config.error_log_path),
            state=self._state,
        )
        logger.info(
            "Run complete: %d uploaded, %d failed, %d batches",
            summary.uploaded_files,
            summary.failed_files,
            summary.batches,
        )
        await self._events.emit("finish", summary)
        return summary

    async def _process_batch(self, index: int, batch: List[UploadTarget]) -> None:
        progress = BatchProgress(index=index, size=len(batch))
        self._stats["batches"] += 1
        self._stats["total_files"] += len(batch)
        logger.info("Batch %d: %d files", index, len(batch))
        await self._events.emit("batch_start", index, len(batch))

        tasks = [
            self._limiter.submit(self._upload_one, target, progress)
            for target in batch
        ]
        # wait for every upload of the batch before surfacing any error
        results = await asyncio.gather(*tasks, return_exceptions=True)
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            self._state = RunState.FAILED
            logger.error("Batch %d aborted: %s", index, errors[0])
            await self._events.emit("error", errors[0])
            raise errors[0]

        logger.info(
            "Batch %d done: %d uploaded, %d failed",
            index,
            progress.uploaded,
            progress.failed,
        )
        await self._events.emit("batch_complete", progress)

    async def _upload_one(self, target: UploadTarget, progress: BatchProgress) -> UploadOutcome:
        outcome = await self._client.upload(target.file_path)

        if outcome.success:
            progress.uploaded += 1
            self._stats["uploaded"] += 1
            await self._events.emit("file_complete", outcome)
        else:
            progress.failed += 1
            self._stats["failed"] += 1
            logger.warning("Upload failed for %s: %s", outcome.file_path, outcome.error)
            await asyncio.to_thread(self._recorder.record, outcome.file_path)
            await self._events.emit("file_fail", outcome)

        return outcome
