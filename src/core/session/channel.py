"""
Update Channel

Carries DiagnosticUpdate values from the engine to the session controller.
Updates sit in a FIFO queue and are handed, one at a time and in publish
order, to the single subscriber by a dedicated consumer thread.
"""

import logging
import queue
import threading
import time
from typing import Callable, Optional

from core.errors import ChannelClosed
from utils.threads import ThreadManager, get_thread_manager

from .models import DiagnosticUpdate

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_NAME = "diag-output"

# Consumer poll interval, bounds how long unsubscribe() waits for the loop
_POLL_INTERVAL = 0.1


class Subscription:
    """Handle returned by UpdateChannel.subscribe()."""

    def __init__(self, channel: 'UpdateChannel', thread_name: str):
        self._channel = channel
        self.thread_name = thread_name
        self._active = True
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self, timeout: float = 5.0) -> bool:
        """Stop the consumer loop. Only the first call does anything.

        Returns:
            True if this call tore the listener down
        """
        with self._lock:
            if not self._active:
                return False
            self._active = False
        self._channel._detach(self, timeout)
        return True


class UpdateChannel:
    """
    Ordered, single-consumer event channel.

    Usage:
        channel = UpdateChannel()
        sub = channel.subscribe(controller.apply_update)
        channel.publish(DiagnosticUpdate(UpdateKind.START, "Starting..."))
        ...
        sub.unsubscribe()
    """

    def __init__(self, name: str = DEFAULT_CHANNEL_NAME,
                 thread_manager: Optional[ThreadManager] = None):
        self.name = name
        self._queue: "queue.Queue[DiagnosticUpdate]" = queue.Queue()
        self._threads = thread_manager or get_thread_manager()
        self._subscription: Optional[Subscription] = None
        self._handler: Optional[Callable[[DiagnosticUpdate], None]] = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None

    def pending(self) -> int:
        """Approximate number of updates waiting to be handled."""
        return self._queue.qsize()

    def publish(self, update: DiagnosticUpdate) -> None:
        """Enqueue an update behind everything published before it.

        Raises:
            ChannelClosed: The channel was closed
            TypeError: Not a DiagnosticUpdate
        """
        if not isinstance(update, DiagnosticUpdate):
            raise TypeError(f"Expected DiagnosticUpdate, got {type(update).__name__}")
        if self._closed:
            raise ChannelClosed(f"Channel {self.name} is closed")
        self._queue.put(update)

    def subscribe(self, handler: Callable[[DiagnosticUpdate], None]) -> Subscription:
        """Attach the single consumer and start its loop.

        Raises:
            ChannelClosed: The channel was closed
            ValueError: The channel already has a subscriber
        """
        with self._lock:
            if self._closed:
                raise ChannelClosed(f"Channel {self.name} is closed")
            if self._subscription is not None:
                raise ValueError(f"Channel {self.name} already has a subscriber")

            thread_name = f"{self.name}-consumer"
            subscription = Subscription(self, thread_name)
            self._subscription = subscription
            self._handler = handler

        try:
            self._threads.start_thread(thread_name, self._consume_loop)
        except RuntimeError:
            with self._lock:
                self._subscription = None
                self._handler = None
            raise
        logger.debug(f"Subscribed to channel {self.name}")
        return subscription

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait until every published update has been handled.

        Returns:
            False if the timeout expired first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks:
                if deadline is None:
                    self._queue.all_tasks_done.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._queue.all_tasks_done.wait(remaining)
        return True

    def close(self, timeout: float = 5.0) -> None:
        """Unsubscribe and refuse further publishes."""
        self._closed = True
        subscription = self._subscription
        if subscription is not None:
            subscription.unsubscribe(timeout)

    def _detach(self, subscription: Subscription, timeout: float) -> None:
        with self._lock:
            if self._subscription is not subscription:
                return
        self._threads.stop_thread(subscription.thread_name, timeout=timeout)
        with self._lock:
            self._subscription = None
            self._handler = None
        logger.debug(f"Unsubscribed from channel {self.name}")

    def _consume_loop(self, stop_event: threading.Event) -> None:
        handler = self._handler
        while not stop_event.is_set():
            try:
                update = self._queue.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue

            try:
                handler(update)
            except Exception as e:
                logger.error(f"Channel {self.name} handler failed on {update.kind.value}: {e}",
                             exc_info=True)
            finally:
                self._queue.task_done()
