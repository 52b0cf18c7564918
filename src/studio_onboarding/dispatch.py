"""
Fire-and-forget progress dispatch.

Plugs into WizardStateMachine as its step listener. Each StepAdvanced event
becomes a background record() task on the running loop; the machine gets
control back immediately and never sees the outcome.
"""

import asyncio
import logging

from .recorder import ProgressRecorder, RecordStatus
from .state import StepAdvanced

logger = logging.getLogger(__name__)


class ProgressDispatcher:
    """One-way channel from step events to the recorder."""

    def __init__(self, recorder: ProgressRecorder):
        self.recorder = recorder
        # Strong refs so in-flight tasks are not garbage collected
        self._pending: set[asyncio.Task] = set()

    def __call__(self, event: StepAdvanced) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop; dropping progress event for step {event.step}")
            return

        task = loop.create_task(self.recorder.record(event.step, event.name))
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every dispatched record to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Progress record task crashed: {error}")
            return
        result = task.result()
        if result.status == RecordStatus.FAILED:
            logger.debug(f"Progress record failed: {result.detail}")
