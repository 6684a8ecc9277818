from abc import ABC, abstractmethod

from ..models import Finding


class AlertSink(ABC):
    """Abstract base class for notification sinks."""

    name: str = "sink"

    @abstractmethod
    def send(self, finding: Finding) -> None:
        """Deliver one finding. May block; raise on failure."""
        pass

    def announce(self, message: str) -> None:
        """Deliver a lifecycle message. Sinks ignore it unless they override this."""
        pass
