"""Activity probes: pluggable sources of non-file anomalies.

A probe stands in for process, network and system-integrity checks. The monitor
polls it once per scan cycle and treats each anomaly like a file finding.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from .models import ActivityAnomaly


class ActivityProbe(ABC):
    """Abstract base class for activity probes."""

    @abstractmethod
    def sample(self) -> list[ActivityAnomaly]:
        """Return the anomalies observed since the last sample."""
        pass


class NullActivityProbe(ActivityProbe):
    """Probe that never reports anything."""

    def sample(self) -> list[ActivityAnomaly]:
        return []


class StaticActivityProbe(ActivityProbe):
    """Reports the same fixed anomalies on every sample."""

    def __init__(self, anomalies: Iterable[ActivityAnomaly]):
        self.anomalies = list(anomalies)

    def sample(self) -> list[ActivityAnomaly]:
        return list(self.anomalies)
