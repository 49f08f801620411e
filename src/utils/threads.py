"""Thread management for the channel consumer loop and engine runs"""

import threading
import logging
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class ThreadManager:
    """Owns netdiag's long-running threads and joins them on shutdown.

    Each managed thread has a unique name and a stop event. The target is
    called with the stop event as its first argument so it can poll it:

        manager = ThreadManager()
        manager.start_thread("diag-output-consumer", loop, args=(queue,))

        # On shutdown
        manager.shutdown(timeout=5)

    Threads that have finished on their own are reaped the next time a
    thread with the same name is started, so a per-run worker can reuse
    its name run after run.
    """

    def __init__(self):
        self._threads: Dict[str, threading.Thread] = {}
        self._stop_events: Dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def start_thread(
        self,
        name: str,
        target: Callable,
        args: tuple = (),
        kwargs: dict = None,
        daemon: bool = True,
    ) -> threading.Event:
        """Start a managed thread.

        Args:
            name: Unique thread name
            target: Function to run, called as target(stop_event, *args, **kwargs)
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            daemon: Daemon threads never block interpreter exit

        Returns:
            The stop event handed to the target

        Raises:
            RuntimeError: If a thread with this name is still alive
        """
        if kwargs is None:
            kwargs = {}

        stop_event = threading.Event()
        with self._lock:
            existing = self._threads.get(name)
            if existing is not None and existing.is_alive():
                raise RuntimeError(f"Thread {name} is already running")

            thread = threading.Thread(
                target=target,
                args=(stop_event,) + tuple(args),
                kwargs=kwargs,
                name=name,
                daemon=daemon,
            )
            self._threads[name] = thread
            self._stop_events[name] = stop_event

        thread.start()
        logger.debug(f"Started managed thread: {name}")
        return stop_event

    def is_running(self, name: str) -> bool:
        with self._lock:
            thread = self._threads.get(name)
            return thread is not None and thread.is_alive()

    def join_thread(self, name: str, timeout: float = 1.0) -> bool:
        """Wait for a thread to finish on its own, without signaling it.

        Returns:
            True if no thread by that name is alive afterwards
        """
        with self._lock:
            thread = self._threads.get(name)
        if thread is None:
            return True
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)
        return not thread.is_alive()

    def stop_thread(self, name: str, timeout: float = 5.0) -> bool:
        """Signal a thread to stop and join it.

        Returns:
            True if the thread is gone, False if it is still running
        """
        with self._lock:
            thread = self._threads.get(name)
            event = self._stop_events.get(name)

        if thread is None:
            logger.debug(f"Thread {name} not found")
            return True

        if event is not None:
            event.set()

        if thread is not threading.current_thread():
            thread.join(timeout=timeout)

        if thread.is_alive():
            logger.warning(f"Thread {name} did not stop within {timeout}s")
            return False

        with self._lock:
            if self._threads.get(name) is thread:
                del self._threads[name]
                self._stop_events.pop(name, None)
        logger.debug(f"Thread {name} stopped")
        return True

    def shutdown(self, timeout: float = 5.0) -> int:
        """Stop all managed threads.

        Returns:
            Number of threads that didn't stop in time
        """
        names = self.running_threads
        if names:
            logger.info(f"Shutting down {len(names)} managed threads...")

        still_running = 0
        with self._lock:
            all_names = list(self._threads)
        for name in all_names:
            if not self.stop_thread(name, timeout=timeout):
                still_running += 1

        if still_running:
            logger.warning(f"{still_running} threads still running after shutdown")
        return still_running

    @property
    def running_threads(self) -> List[str]:
        """Get names of currently running threads."""
        with self._lock:
            return [name for name, t in self._threads.items() if t.is_alive()]


# Global instance for app-wide thread management
_global_manager: Optional[ThreadManager] = None


def get_thread_manager() -> ThreadManager:
    """Get the global thread manager instance."""
    global _global_manager
    if _global_manager is None:
        _global_manager = ThreadManager()
    return _global_manager

