"""In-memory ledger of accepted findings used to suppress repeat alerts."""

import threading

from .models import Finding

DEFAULT_HISTORY_LIMIT = 1000
DEFAULT_DEDUP_WINDOW = 50


class DedupHistory:
    """Bounded, ordered record of previously reported findings.

    A candidate is a duplicate when its dedup key (file, category, keyword)
    equals that of one of the last ``window`` accepted findings. When an
    insertion pushes the ledger past ``max_entries`` it is cut back to the
    newest half in a single trim.
    """

    def __init__(self, max_entries: int = DEFAULT_HISTORY_LIMIT, window: int = DEFAULT_DEDUP_WINDOW):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if window < 1:
            raise ValueError("window must be at least 1")
        self.max_entries = max_entries
        self.window = window
        self._entries: list[Finding] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entries)

    def is_duplicate(self, finding: Finding) -> bool:
        key = finding.dedup_key
        return any(entry.dedup_key == key for entry in self._entries[-self.window:])

    def record(self, finding: Finding) -> None:
        with self._lock:
            self._entries.append(finding)
            if len(self._entries) > self.max_entries:
                keep = max(1, self.max_entries // 2)
                self._entries = self._entries[-keep:]

    def check_and_record(self, finding: Finding) -> bool:
        """Record the finding unless it is a duplicate.

        Returns:
            True if the finding was novel and has been recorded.
        """
        with self._lock:
            if self.is_duplicate(finding):
                return False
            self.record(finding)
            return True

    def entries(self) -> tuple[Finding, ...]:
        """Snapshot of the ledger, oldest first."""
        return tuple(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries = []
