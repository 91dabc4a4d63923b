"""Orchestrator data models."""
from dataclasses import dataclass
from enum import Enum


class RunState(Enum):
    """State of a batch upload run."""
    IDLE = "idle"
    ENUMERATING = "enumerating"
    BATCH_IN_FLIGHT = "batch_in_flight"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunSummary:
    """Result of a batch upload run."""
    total_files: int
    uploaded_files: int
    failed_files: int
    batches: int
    error_log_path: str
    state: RunState = RunState.DONE

    @property
    def all_success(self) -> bool:
        return self.failed_files == 0
