"""Drives periodic and on-demand scan cycles."""

import logging
import threading
from pathlib import Path
from typing import Optional

from .detector import Detector
from .dispatcher import AlertDispatcher
from .errors import ConcurrentScanRejected
from .file_walker import FileWalker
from .history import DedupHistory
from .models import Finding, MonitorState, ScanCycle, ScanReport, utc_now
from .probe import ActivityProbe

logger = logging.getLogger(__name__)

START_ANNOUNCEMENT = "Continuous security monitoring activated for your development environment"
STOP_ANNOUNCEMENT = "Security monitoring deactivated"


class ScanScheduler:
    """Owns the Idle/Running lifecycle and runs one cycle at a time.

    Cycles triggered by the timer and by scan_once() share a non-blocking
    lock: a manual request that finds a cycle in progress is rejected with
    ConcurrentScanRejected, and a timer tick in the same situation is skipped.
    """

    def __init__(
        self,
        target_root: str | Path,
        walker: FileWalker,
        detector: Detector,
        history: DedupHistory,
        dispatcher: AlertDispatcher,
        state: MonitorState,
        probe: Optional[ActivityProbe] = None,
    ):
        self.target_root = Path(target_root)
        self.walker = walker
        self.detector = detector
        self.history = history
        self.dispatcher = dispatcher
        self.state = state
        self.probe = probe
        self._cycle_lock = threading.Lock()
        self._counter_lock = threading.Lock()
        self._lifecycle_lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._timer_thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    @property
    def is_busy(self) -> bool:
        return self._cycle_lock.locked()

    def start(self, interval_seconds: Optional[int] = None) -> bool:
        """Begin recurring monitoring.

        Runs one cycle immediately, then one per interval on a background
        thread. Calling start() while running changes nothing.

        Returns:
            True if monitoring was started, False if it was already running.
        """
        with self._lifecycle_lock:
            if self.state.is_running:
                logger.info("Monitoring is already active")
                return False
            if interval_seconds is not None:
                if interval_seconds < 1:
                    raise ValueError("interval_seconds must be at least 1")
                self.state.interval_seconds = interval_seconds
            self.state.is_running = True
            stop_event = threading.Event()
            self._stop_event = stop_event

        logger.info(f"Starting continuous security monitoring (every {self.state.interval_seconds}s)")
        self.dispatcher.announce(START_ANNOUNCEMENT)

        self._run_guarded_cycle()

        thread = threading.Thread(
            target=self._timer_loop,
            args=(stop_event, self.state.interval_seconds),
            name="scan-scheduler",
            daemon=True,
        )
        self._timer_thread = thread
        thread.start()
        return True

    def stop(self) -> bool:
        """Stop recurring monitoring. A cycle already in progress still completes.

        Returns:
            True if monitoring was stopped, False if it was not running.
        """
        with self._lifecycle_lock:
            if not self.state.is_running:
                logger.info("Monitoring is not active")
                return False
            self.state.is_running = False
            if self._stop_event is not None:
                self._stop_event.set()
            self._stop_event = None

        logger.info("Security monitoring stopped")
        self.dispatcher.announce(STOP_ANNOUNCEMENT)
        return True

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the timer thread to exit after stop()."""
        thread = self._timer_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        if thread is not None and not thread.is_alive():
            self._timer_thread = None

    def scan_once(self) -> ScanReport:
        """Run exactly one cycle, independent of the recurring timer.

        Raises:
            ConcurrentScanRejected: If another cycle is in progress.
        """
        if not self._cycle_lock.acquire(blocking=False):
            raise ConcurrentScanRejected("A scan cycle is already in progress")
        try:
            return self._run_cycle()
        finally:
            self._cycle_lock.release()

    def _timer_loop(self, stop_event: threading.Event, interval: int) -> None:
        while not stop_event.wait(interval):
            self._run_guarded_cycle()

    def _run_guarded_cycle(self) -> Optional[ScanReport]:
        """Run a scheduled cycle, skipping it if busy and logging any failure."""
        try:
            return self.scan_once()
        except ConcurrentScanRejected:
            logger.info("Scheduled scan skipped: previous cycle still running")
        except Exception:
            logger.exception("Scan cycle failed")
        return None

    def _next_cycle_id(self) -> int:
        with self._counter_lock:
            self.state.cycle_count += 1
            return self.state.cycle_count

    def _run_cycle(self) -> ScanReport:
        cycle = ScanCycle(cycle_id=self._next_cycle_id(), target_root=str(self.target_root))
        logger.info(f"Performing security scan #{cycle.cycle_id} at {cycle.started_at.isoformat()}")

        files_scanned = 0
        raw = 0
        accepted: list[Finding] = []

        for path in self.walker.walk(self.target_root):
            files_scanned += 1
            for finding in self.detector.scan_file(path, cycle.cycle_id):
                raw += 1
                if self._accept(finding):
                    accepted.append(finding)

        if self.probe is not None:
            for finding in self._probe_findings(cycle):
                raw += 1
                if self._accept(finding):
                    accepted.append(finding)

        finished_at = utc_now()
        self.state.last_scan_at = finished_at

        if accepted:
            logger.info(f"Scan #{cycle.cycle_id}: {len(accepted)} new threat(s) in {files_scanned} files")
        else:
            logger.info(f"Scan #{cycle.cycle_id}: no new threats detected in {files_scanned} files")

        return ScanReport(
            cycle_id=cycle.cycle_id,
            target_root=cycle.target_root,
            started_at=cycle.started_at,
            finished_at=finished_at,
            files_scanned=files_scanned,
            raw_findings=raw,
            suppressed=raw - len(accepted),
            findings=accepted,
        )

    def _accept(self, finding: Finding) -> bool:
        if not self.history.check_and_record(finding):
            return False
        self.dispatcher.dispatch(finding)
        return True

    def _probe_findings(self, cycle: ScanCycle) -> list[Finding]:
        try:
            anomalies = self.probe.sample()
        except Exception:
            logger.exception("Activity probe failed")
            return []
        return [
            Finding(
                category=anomaly.category,
                severity=anomaly.severity,
                file_path=anomaly.source,
                message=anomaly.message,
                scan_cycle_id=cycle.cycle_id,
            )
            for anomaly in anomalies
        ]
