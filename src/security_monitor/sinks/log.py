import logging

from ..models import Finding, Severity
from .base import AlertSink

logger = logging.getLogger(__name__)

SEVERITY_LOG_LEVELS = {
    Severity.CRITICAL: logging.CRITICAL,
    Severity.HIGH: logging.ERROR,
    Severity.MEDIUM: logging.WARNING,
    Severity.LOW: logging.INFO,
}


def format_finding(finding: Finding) -> str:
    """Render a finding as a multi-line threat record."""
    lines = [
        "THREAT DETECTED:",
        f"   Type: {finding.category}",
        f"   Severity: {finding.severity.value.upper()}",
        f"   File: {finding.file_path}",
        f"   Message: {finding.message}",
    ]
    if finding.matched_keyword:
        lines.append(f"   Keyword: {finding.matched_keyword}")
    lines.append(f"   Time: {finding.detected_at.isoformat()}")
    return "\n".join(lines)


class LogSink(AlertSink):
    """Writes each finding to the log at a level matching its severity."""

    name = "log"

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target or logger

    def send(self, finding: Finding) -> None:
        level = SEVERITY_LOG_LEVELS.get(finding.severity, logging.WARNING)
        self.logger.log(level, format_finding(finding))

    def announce(self, message: str) -> None:
        self.logger.info(message)
