"""
Ordered downstream delivery of reconciliation events.

This module provides the ResultForwarder class that hands accept and
replace events to the translation/broadcast layer from a single background
task, so emission never blocks transcript processing and per-session order
is preserved.
"""

import asyncio
import logging
from typing import Optional, Protocol

from transcript_reconciler.exceptions import EmissionError
from transcript_reconciler.models.events import AcceptEvent, DownstreamEvent, ReplaceEvent
from transcript_reconciler.utils.text_normalization import preview_text

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    """
    Protocol defining the interface for the downstream consumer.

    This protocol allows the ResultForwarder to work with any translation
    or broadcast implementation that provides accept and replace methods.
    """

    async def accept(self, event: AcceptEvent) -> None:
        """
        Handle a newly accepted sentence.

        Args:
            event: Accepted sentence
        """
        ...

    async def replace(self, event: ReplaceEvent) -> None:
        """
        Handle a previously emitted sentence superseded by an expansion.

        Args:
            event: Old and new text
        """
        ...


class ResultForwarder:
    """
    Forwards events to a ResultSink in submission order.

    Events are queued by enqueue(), which never awaits, and delivered one at
    a time by a background task. A failing sink call is logged and the next
    event is still delivered.

    Attributes:
        sink: Downstream consumer
        session_id: Session identifier for logs
        delivered_count: Events delivered successfully
        failed_count: Events whose delivery raised
    """

    def __init__(self, sink: ResultSink, session_id: str = "", max_queue_size: int = 0):
        """
        Initialize result forwarder.

        Args:
            sink: Downstream consumer
            session_id: Session identifier
            max_queue_size: Maximum pending events, 0 for unbounded
        """
        self.sink = sink
        self.session_id = session_id
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self.delivered_count = 0
        self.failed_count = 0
        self._task: Optional[asyncio.Task] = None

        logger.debug(f"ResultForwarder initialized for session {session_id}")

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending_count(self) -> int:
        return self.queue.qsize()

    def start(self) -> None:
        """
        Start the delivery task on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._deliver_loop())

    def enqueue(self, event: DownstreamEvent) -> None:
        """
        Queue an event for delivery without waiting for it.

        Args:
            event: Accept or replace event

        Raises:
            EmissionError: If the bounded queue is full
        """
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull as e:
            logger.error(
                f"Emission queue full for session {self.session_id}, "
                f"dropping event {event.sequence}"
            )
            raise EmissionError(
                f"Emission queue full ({self.queue.maxsize} pending)"
            ) from e

    async def drain(self) -> None:
        """Wait until every queued event has been delivered."""
        if not self.is_running and not self.queue.empty():
            self.start()
        await self.queue.join()

    async def stop(self) -> None:
        """Drain the queue, then cancel the delivery task."""
        await self.drain()

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.debug(
            f"ResultForwarder stopped for session {self.session_id}: "
            f"delivered={self.delivered_count}, failed={self.failed_count}"
        )

    async def _deliver_loop(self) -> None:
        while True:
            event = await self.queue.get()
            try:
                await self._deliver(event)
                self.delivered_count += 1
            except Exception as e:
                self.failed_count += 1
                logger.error(
                    f"Failed to deliver event {event.sequence} for session "
                    f"{self.session_id}: {e}",
                    exc_info=True
                )
            finally:
                self.queue.task_done()

    async def _deliver(self, event: DownstreamEvent) -> None:
        if isinstance(event, ReplaceEvent):
            await self.sink.replace(event)
            logger.info(
                f"Forwarded replacement for session {self.session_id}: "
                f"'{preview_text(event.old_text)}' -> '{preview_text(event.new_text)}'"
            )
        else:
            await self.sink.accept(event)
            logger.info(
                f"Forwarded sentence for session {self.session_id}: "
                f"'{preview_text(event.text)}' (reason: {event.reason})"
            )
