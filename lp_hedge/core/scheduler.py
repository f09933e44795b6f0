"""
Scheduler: Triggers monitoring cycles at a fixed poll interval.

Cycle errors are logged and do not stop the loop; the callback decides
(via the kill switch) when polling should halt.
"""

import logging
import time
from typing import Callable, Optional

from lp_hedge.core.config import Config

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Fixed-interval poll scheduler.

    Calls cycle_callback, then sleeps until poll_interval_sec has elapsed
    since the cycle started. A slow cycle is followed immediately by the next.
    """

    def __init__(
        self,
        config: Config,
        cycle_callback: Callable[[], None],
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize scheduler.

        Args:
            config: System configuration
            cycle_callback: Function to call on each poll
            sleep: Sleep function (injectable for tests)
            clock: Monotonic clock (injectable for tests)
        """
        self.config = config
        self.cycle_callback = cycle_callback
        self.running = False
        self.last_cycle_ts: Optional[float] = None
        self.cycles_run: int = 0
        self._sleep = sleep
        self._clock = clock

    def seconds_until_next_cycle(self) -> float:
        """Seconds left before the next poll is due."""
        if self.last_cycle_ts is None:
            return 0.0
        elapsed = self._clock() - self.last_cycle_ts
        return max(0.0, self.config.scheduler.poll_interval_sec - elapsed)

    def run_once(self):
        """Run one cycle, logging instead of raising on failure."""
        self.last_cycle_ts = self._clock()
        self.cycles_run += 1
        try:
            self.cycle_callback()
        except Exception:
            logger.exception("Cycle %d failed", self.cycles_run)

    def run_forever(self, max_cycles: Optional[int] = None):
        """
        Run scheduler loop until stopped.

        Args:
            max_cycles: Stop after this many cycles (None = unbounded)
        """
        self.running = True
        logger.info("Scheduler started. Interval=%ss", self.config.scheduler.poll_interval_sec)

        while self.running:
            try:
                sleep_sec = self.seconds_until_next_cycle()
                if sleep_sec > 0:
                    self._sleep(sleep_sec)
                    continue

                self.run_once()

                if max_cycles is not None and self.cycles_run >= max_cycles:
                    self.running = False

            except KeyboardInterrupt:
                logger.info("Scheduler interrupted by user")
                self.running = False
                break

    def stop(self):
        """Stop the scheduler loop."""
        logger.info("Scheduler stopping...")
        self.running = False
