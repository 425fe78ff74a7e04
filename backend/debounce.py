"""
Delayed auto-parse trigger.

Each keystroke schedules a parse of the current input after a pause. A newer
schedule for the same key cancels the pending one, so only the last value
typed before the pause is parsed.

This is a stand-alone helper for clients that preview parses while the user
types (the task input box calls POST /api/tasks/parse through it). The HTTP
app itself does not import it.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Hashable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    def __init__(self, callback: Callable[[str], Awaitable[Any]], delay: float = 1.0, min_length: int = 10):
        self.callback = callback
        self.delay = delay
        self.min_length = min_length
        self._pending: dict[Hashable, asyncio.Task] = {}

    def schedule(self, key: Hashable, value: str) -> Optional[asyncio.Task]:
        """
        Schedule callback(value) for key after the delay, superseding any pending call.
        Inputs of min_length characters or fewer only cancel; nothing is scheduled.
        Must be called from a running event loop.
        """
        self.cancel(key)
        if len(value) <= self.min_length:
            return None

        task = asyncio.get_running_loop().create_task(self._run(key, value))
        self._pending[key] = task
        return task

    async def _run(self, key: Hashable, value: str) -> Any:
        try:
            await asyncio.sleep(self.delay)
            return await self.callback(value)
        finally:
            # Only drop our own entry; a newer schedule may have replaced it
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    def cancel(self, key: Hashable) -> bool:
        task = self._pending.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Cancelled pending parse for %r", key)
        return True

    def pending(self, key: Hashable) -> bool:
        task = self._pending.get(key)
        return task is not None and not task.done()

    async def wait(self, key: Hashable) -> Any:
        """Wait for the pending call for key and return its result (None if nothing is pending)."""
        task = self._pending.get(key)
        if task is None:
            return None
        return await task
