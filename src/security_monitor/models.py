"""Pydantic models for the continuous security monitor."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Severity(str, Enum):
    """Severity class assigned to a finding."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Finding categories produced by the detector and the monitor itself
CATEGORY_KEYWORD = "Suspicious Code Pattern"
CATEGORY_CREDENTIAL = "Credential Exposure"
CATEGORY_EXECUTION = "Suspicious Code Execution"
CATEGORY_TEST = "Test Alert"


class Finding(BaseModel):
    """One detected pattern match in one file during one scan cycle."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique finding identifier")
    category: str = Field(description="Category (e.g., 'Credential Exposure')")
    severity: Severity = Field(description="Severity level: critical, high, medium, low")
    file_path: str = Field(description="File (or probe source) where the match was found")
    matched_keyword: Optional[str] = Field(default=None, description="Catalog keyword that matched, if any")
    message: str = Field(description="Human-readable description")
    detected_at: datetime = Field(default_factory=utc_now, description="When the match was made (UTC)")
    scan_cycle_id: int = Field(default=0, description="Scan cycle that produced the finding")
    rule: Optional[str] = Field(default=None, description="Structural rule that fired, if any")

    @property
    def dedup_key(self) -> tuple[str, str, Optional[str]]:
        """Identity used to suppress repeat alerts."""
        return (self.file_path, self.category, self.matched_keyword)

    @property
    def file_name(self) -> str:
        return Path(self.file_path).name


class ScanCycle(BaseModel):
    """Descriptor for a single traversal, alive only while it runs."""

    model_config = ConfigDict(frozen=True)

    cycle_id: int = Field(description="Monotonically increasing cycle number")
    started_at: datetime = Field(default_factory=utc_now)
    target_root: str = Field(description="Root directory being traversed")


class MonitorState(BaseModel):
    """Lifecycle flags owned by the scheduler."""

    is_running: bool = Field(default=False)
    cycle_count: int = Field(default=0)
    interval_seconds: int = Field(default=60)
    last_scan_at: Optional[datetime] = Field(default=None)


class MonitorStatus(BaseModel):
    """Result of a status query."""

    is_running: bool
    cycle_count: int
    threat_count: int = Field(description="Number of findings held in the history ledger")
    interval_seconds: int
    last_scan_at: Optional[datetime] = None


class ScanReport(BaseModel):
    """Summary of one completed scan cycle."""

    cycle_id: int
    target_root: str
    started_at: datetime
    finished_at: datetime
    files_scanned: int = Field(default=0)
    raw_findings: int = Field(default=0, description="Matches before duplicate suppression")
    suppressed: int = Field(default=0, description="Matches dropped as duplicates")
    findings: list[Finding] = Field(default_factory=list, description="Accepted (novel) findings")


class ActivityAnomaly(BaseModel):
    """Candidate anomaly reported by an activity probe."""

    category: str
    severity: Severity
    message: str
    source: str = Field(default="<system>", description="Where the anomaly was observed")


class StartRequest(BaseModel):
    """Request body for starting recurring monitoring."""

    interval_seconds: Optional[int] = Field(default=None, ge=1, description="Seconds between scan cycles")
