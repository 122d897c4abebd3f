# ABOUTME: Debouncer that coalesces bursts of change notifications into one call.
# ABOUTME: Each trigger restarts the delay up to an optional max wait; flush runs a call now.

import threading
import time
from collections.abc import Callable


class Debouncer:
    """Runs a callback once after triggers stop arriving for `delay` seconds.

    With `max_wait` set, a steady stream of triggers cannot postpone the call
    for longer than that many seconds after the first one.
    """

    def __init__(
        self, delay: float, callback: Callable[[], None], max_wait: float | None = None
    ) -> None:
        """Initialize the debouncer.

        Args:
            delay: Quiet period in seconds before the callback runs.
            callback: Function to run, on a timer thread.
            max_wait: Longest time in seconds a pending call may be held back.
                None lets triggers postpone it indefinitely.
        """
        self.delay = delay
        self.max_wait = max_wait
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._deadline: float | None = None

    @property
    def pending(self) -> bool:
        """True while a call is scheduled."""
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        """Schedule the callback, restarting the delay if one is already scheduled."""
        with self._lock:
            now = time.monotonic()
            if self._timer is not None:
                self._timer.cancel()
            elif self.max_wait is not None:
                self._deadline = now + self.max_wait
            wait = self.delay
            if self._deadline is not None:
                wait = max(0.0, min(wait, self._deadline - now))
            timer = threading.Timer(wait, self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def flush(self) -> bool:
        """Run a scheduled call now instead of waiting.

        Returns:
            True if a call was pending and has run.
        """
        with self._lock:
            timer = self._timer
            self._timer = None
            self._deadline = None
        if timer is None:
            return False
        timer.cancel()
        self._callback()
        return True

    def cancel(self) -> None:
        """Drop a scheduled call without running it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._deadline = None

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or self._timer is not threading.current_thread():
                return
            self._timer = None
            self._deadline = None
        self._callback()
