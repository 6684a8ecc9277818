from typing import Callable, Optional

from ..models import Finding
from .base import AlertSink


class ObserverSink(AlertSink):
    """Forwards findings to a status observer such as a UI refresh hook."""

    name = "observer"

    def __init__(
        self,
        on_finding: Callable[[Finding], None],
        on_announce: Optional[Callable[[str], None]] = None,
    ):
        self.on_finding = on_finding
        self.on_announce = on_announce

    def send(self, finding: Finding) -> None:
        self.on_finding(finding)

    def announce(self, message: str) -> None:
        if self.on_announce is not None:
            self.on_announce(message)
