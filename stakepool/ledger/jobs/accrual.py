# MIT License
# Copyright (c) 2025 Hashborn

import logging
import threading
from typing import Callable, Optional

from ..core.ledger import Ledger
from ..core.rewards import AccrualReport

logger = logging.getLogger(__name__)


class AccrualJob:
    """
    Runs the reward accrual tick on a fixed interval in a background thread.

    The interval is not corrected for drift or missed ticks: each tick credits
    exactly one period of interest whenever it fires.
    """

    def __init__(self, ledger: Ledger, interval_sec: Optional[float] = None):
        self.ledger = ledger
        self.interval_sec = interval_sec if interval_sec is not None else ledger.config.accrual_interval_sec
        self.running = False
        self.thread: Optional[threading.Thread] = None
        self.on_tick: Optional[Callable[[AccrualReport], None]] = None
        self._stop_event = threading.Event()

    def start(self):
        if self.running:
            logger.warning("AccrualJob already running")
            return
        self.running = True
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._run_loop, name="accrual-job", daemon=True)
        self.thread.start()
        logger.info(f"AccrualJob started. Interval: {self.interval_sec}s")

    def stop(self):
        self.running = False
        self._stop_event.set()
        if self.thread:
            self.thread.join()
            self.thread = None

    def run_once(self) -> AccrualReport:
        report = self.ledger.run_accrual_tick()
        if self.on_tick:
            self.on_tick(report)
        return report

    def _run_loop(self):
        while self.running:
            # Returns True as soon as stop() is called
            if self._stop_event.wait(self.interval_sec):
                break
            try:
                self.run_once()
            except Exception as e:
                logger.error(f"Error in accrual loop: {e}")
