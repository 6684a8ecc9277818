"""Fans accepted findings out to notification sinks."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Iterable, Optional

from .errors import SinkDeliveryError
from .models import Finding
from .sinks.base import AlertSink

logger = logging.getLogger(__name__)


class AlertDispatcher:
    """Delivers findings to every registered sink without blocking the caller.

    Each sink delivery runs as its own job on a worker pool, so a slow or
    failing sink never delays the scan loop or the other sinks.
    """

    def __init__(self, sinks: Optional[Iterable[AlertSink]] = None, max_workers: int = 4):
        self.sinks: tuple[AlertSink, ...] = tuple(sinks or ())
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="alert-sink")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    @property
    def sink_names(self) -> list[str]:
        return [sink.name for sink in self.sinks]

    def _deliver(self, sink: AlertSink, finding: Finding) -> None:
        try:
            sink.send(finding)
        except Exception as e:
            error = SinkDeliveryError(sink.name, e)
            logger.error(f"Alert delivery failed for finding {finding.id}: {error}")

    def _announce(self, sink: AlertSink, message: str) -> None:
        try:
            sink.announce(message)
        except Exception as e:
            logger.error(f"Announcement failed: {SinkDeliveryError(sink.name, e)}")

    def _submit(self, fn, *args) -> None:
        future = self._executor.submit(fn, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def dispatch(self, finding: Finding) -> None:
        """Queue delivery of a finding to every sink and return immediately."""
        for sink in self.sinks:
            self._submit(self._deliver, sink, finding)

    def announce(self, message: str) -> None:
        """Queue a lifecycle message (monitor started/stopped) to every sink."""
        for sink in self.sinks:
            self._submit(self._announce, sink, message)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for queued deliveries.

        Returns:
            True if every delivery finished within the timeout.
        """
        with self._lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, timeout: Optional[float] = None) -> None:
        self.drain(timeout)
        self._executor.shutdown(wait=False)
