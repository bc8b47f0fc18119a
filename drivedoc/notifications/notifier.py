"""Background loop that runs the expiry scan on a fixed interval."""

from __future__ import annotations

import threading
from typing import Optional

from ..utils.logger import get_logger
from .scanner import ExpiryScanner, ScanReport

logger = get_logger(__name__)


class ExpiryNotifier:
    """
    Owns one daemon thread. start() scans immediately, then once per
    interval until stop(). Scans run one after another inside the thread.
    """

    def __init__(self, scanner: ExpiryScanner, interval_seconds: float = 3600):
        self.scanner = scanner
        self.interval_seconds = interval_seconds
        self.last_report: Optional[ScanReport] = None
        self.runs = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> Optional[ScanReport]:
        try:
            self.last_report = self.scanner.scan()
        except Exception as e:
            logger.exception("Expiry scan cycle error", error=str(e))
            return None
        finally:
            self.runs += 1
        return self.last_report

    def _loop(self) -> None:
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self.interval_seconds)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True, name="expiry-notifier")
        self._thread.start()
        logger.info("Expiry notifier started", interval_seconds=self.interval_seconds)

    def stop(self, timeout: float = 2) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Expiry notifier thread still alive after timeout, continuing shutdown")
            self._thread = None
        logger.info("Expiry notifier stopped")
