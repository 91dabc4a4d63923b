"""Run events: batch progress records and the emitter that dispatches them."""
import asyncio
import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List

logger = logging.getLogger(__name__)


@dataclass
class BatchProgress:
    """Upload counts for one batch, filled in as its uploads settle."""
    index: int
    size: int
    uploaded: int = 0
    failed: int = 0

    @property
    def settled(self) -> int:
        return self.uploaded + self.failed


class EventEmitter:
    """
    Dispatches run events (batch_start, file_complete, file_fail,
    batch_complete, finish, error) to subscribed listeners.

    Listeners may be plain callables or coroutine functions. A listener that
    raises is logged and skipped; it never affects the uploads.
    """

    def __init__(self):
        self._listeners: DefaultDict[str, List[Callable]] = defaultdict(list)
        # uploads settle concurrently; keep console output for one outcome together
        self._lock = asyncio.Lock()

    def on(self, event_name: str, callback: Callable):
        """Subscribe ``callback`` to ``event_name``; duplicates are ignored."""
        if callback not in self._listeners[event_name]:
            self._listeners[event_name].append(callback)

    async def emit(self, event_name: str, *args, **kwargs):
        listeners = list(self._listeners.get(event_name, ()))
        if not listeners:
            return

        async with self._lock:
            for callback in listeners:
                try:
                    result = callback(*args, **kwargs)
                    if inspect.isawaitable(result):
                        await result
                except Exception as exc:
                    logger.error("Listener %r for %s failed: %s", callback, event_name, exc)
