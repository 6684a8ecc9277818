"""Spoken alerts via the macOS ``say`` command."""

import logging
import platform
import shutil
import subprocess
from typing import Optional

from ..models import Finding
from .base import AlertSink

logger = logging.getLogger(__name__)


def threat_utterance(finding: Finding) -> str:
    return (
        f"Security threat detected: {finding.category}. "
        f"Severity level {finding.severity.value}. "
        f"Check file {finding.file_name}."
    )


class VoiceSink(AlertSink):
    """Speaks alerts when a speech command is available, otherwise logs them."""

    name = "voice"

    def __init__(self, command: Optional[str] = None, timeout: int = 30):
        if command is None and platform.system() == "Darwin":
            command = shutil.which("say")
        self.command = command
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return self.command is not None

    def speak(self, message: str) -> None:
        """Speak a message.

        Raises:
            subprocess.CalledProcessError: If the speech command fails.
            subprocess.TimeoutExpired: If speaking takes longer than the timeout.
        """
        if not self.available:
            logger.info(f"ALERT: {message}")
            return
        subprocess.run(
            [self.command, message],
            capture_output=True,
            text=True,
            timeout=self.timeout,
            check=True,
        )

    def send(self, finding: Finding) -> None:
        self.speak(threat_utterance(finding))

    def announce(self, message: str) -> None:
        self.speak(message)
