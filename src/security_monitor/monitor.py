"""Composition root that wires catalog, walker, detector, history and sinks."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from .config import MonitorConfig
from .detector import Detector
from .dispatcher import AlertDispatcher
from .errors import ConfigurationIncomplete, InvalidTargetRoot
from .file_walker import FileWalker
from .history import DedupHistory
from .models import CATEGORY_TEST, Finding, MonitorState, MonitorStatus, ScanReport, Severity
from .patterns import PatternCatalog
from .probe import ActivityProbe
from .scheduler import ScanScheduler
from .sinks import AlertSink, LogSink, SmsSink, VoiceSink

logger = logging.getLogger(__name__)


def default_sinks(config: MonitorConfig) -> list[AlertSink]:
    """Build the standard sinks; SMS is left out when Twilio is not configured."""
    sinks: list[AlertSink] = [LogSink()]
    if config.voice_enabled:
        sinks.append(VoiceSink())
    if config.sms_enabled:
        try:
            sinks.append(SmsSink.from_env())
        except ConfigurationIncomplete as e:
            logger.info(str(e))
    return sinks


class SecurityMonitor:
    """A continuous security monitor for one target root.

    Args:
        config: Monitor settings.
        sinks: Notification sinks (default: log, voice and, if configured, SMS).
        probe: Optional activity probe polled once per cycle.

    Raises:
        InvalidTargetRoot: If the target root is missing or not a directory.
    """

    def __init__(
        self,
        config: Optional[MonitorConfig] = None,
        sinks: Optional[Iterable[AlertSink]] = None,
        probe: Optional[ActivityProbe] = None,
    ):
        self.config = config or MonitorConfig()
        root = Path(self.config.target_root)
        if not root.exists():
            raise InvalidTargetRoot(f"Target root does not exist: {root}")
        if not root.is_dir():
            raise InvalidTargetRoot(f"Target root is not a directory: {root}")

        self.catalog = PatternCatalog.from_config(self.config.keywords, self.config.keyword_severity)
        self.walker = FileWalker(self.config.ignore_dirs, self.config.extensions)
        self.detector = Detector(self.catalog, max_file_bytes=self.config.max_file_bytes)
        self.history = DedupHistory(max_entries=self.config.history_limit, window=self.config.dedup_window)
        self.dispatcher = AlertDispatcher(default_sinks(self.config) if sinks is None else sinks)
        self.state = MonitorState(interval_seconds=self.config.interval_seconds)
        self.scheduler = ScanScheduler(
            target_root=root,
            walker=self.walker,
            detector=self.detector,
            history=self.history,
            dispatcher=self.dispatcher,
            state=self.state,
            probe=probe,
        )
        logger.debug(f"Monitor ready for {root} with sinks: {self.dispatcher.sink_names}")

    def scan_once(self) -> ScanReport:
        return self.scheduler.scan_once()

    def start(self, interval_seconds: Optional[int] = None) -> bool:
        return self.scheduler.start(interval_seconds)

    def stop(self) -> bool:
        return self.scheduler.stop()

    def status(self) -> MonitorStatus:
        return MonitorStatus(
            is_running=self.state.is_running,
            cycle_count=self.state.cycle_count,
            threat_count=len(self.history),
            interval_seconds=self.state.interval_seconds,
            last_scan_at=self.state.last_scan_at,
        )

    def generate_test_finding(self) -> Finding:
        """Push a synthetic finding through history and every sink."""
        finding = Finding(
            category=CATEGORY_TEST,
            severity=Severity.MEDIUM,
            file_path="test-file.js",
            message="This is a test security alert to verify system functionality",
            scan_cycle_id=self.state.cycle_count,
        )
        self.history.record(finding)
        self.dispatcher.dispatch(finding)
        return finding

    def close(self, timeout: Optional[float] = 10.0) -> None:
        """Stop monitoring and flush pending alerts."""
        self.scheduler.stop()
        self.scheduler.join(timeout)
        self.dispatcher.shutdown(timeout)
