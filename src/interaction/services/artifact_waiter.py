import logging
import os
import time
from typing import Callable

logger = logging.getLogger(__name__)


class ArtifactWaiter:
    """
    Waits for a log artifact to show up on disk before it is uploaded.
    Sleeps a fixed initial delay, then polls with exponential backoff
    until the file is non-empty or the deadline passes.
    """

    def __init__(
        self,
        initial_delay_seconds: float = 2.0,
        max_wait_seconds: float = 10.0,
        poll_interval_seconds: float = 0.25,
        max_poll_interval_seconds: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.initial_delay_seconds = initial_delay_seconds
        self.max_wait_seconds = max_wait_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.max_poll_interval_seconds = max_poll_interval_seconds
        self._sleep = sleep
        self._clock = clock

    def wait(self, path: str) -> bool:
        if self.initial_delay_seconds > 0:
            self._sleep(self.initial_delay_seconds)

        deadline = self._clock() + self.max_wait_seconds
        interval = self.poll_interval_seconds
        while True:
            if self._is_ready(path):
                return True
            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(f"Log artifact not available after {self.max_wait_seconds}s: {path}")
                return False
            self._sleep(min(interval, remaining))
            interval = min(interval * 2, self.max_poll_interval_seconds)

    @staticmethod
    def _is_ready(path: str) -> bool:
        try:
            return os.path.getsize(path) > 0
        except OSError:
            return False
