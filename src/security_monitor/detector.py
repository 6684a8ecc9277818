"""Applies the pattern catalog to file contents."""

import logging
from pathlib import Path
from typing import Optional

from .errors import TraversalError
from .models import CATEGORY_KEYWORD, Finding
from .patterns import PatternCatalog

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_BYTES = 1_000_000


def is_binary_file(file_path: Path) -> bool:
    """Check for a NUL byte in the first 1KB."""
    with open(file_path, "rb") as f:
        chunk = f.read(1024)
    return b"\x00" in chunk


class Detector:
    """Turns file contents into raw findings."""

    def __init__(
        self,
        catalog: Optional[PatternCatalog] = None,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ):
        self.catalog = catalog or PatternCatalog.default()
        self.max_file_bytes = max_file_bytes

    def inspect(self, file_path: str | Path, content: str, scan_cycle_id: int = 0) -> list[Finding]:
        """Match lowercased content against every rule in the catalog.

        Each keyword present yields one finding no matter how often it occurs,
        and each structural rule yields at most one finding per file.

        Args:
            file_path: Path reported on the findings.
            content: Lowercased file text.
            scan_cycle_id: Cycle the findings belong to.

        Returns:
            Findings in catalog order (keywords first, then structural rules).
        """
        path = str(file_path)
        findings: list[Finding] = []

        for rule in self.catalog.keyword_rules:
            if rule.keyword in content:
                findings.append(
                    Finding(
                        category=CATEGORY_KEYWORD,
                        severity=rule.severity,
                        file_path=path,
                        matched_keyword=rule.keyword,
                        message=f'Potentially suspicious keyword "{rule.keyword}" found',
                        scan_cycle_id=scan_cycle_id,
                    )
                )

        for rule in self.catalog.structural_rules:
            if rule.regex.search(content):
                findings.append(
                    Finding(
                        category=rule.category,
                        severity=rule.severity,
                        file_path=path,
                        message=rule.message,
                        scan_cycle_id=scan_cycle_id,
                        rule=rule.name,
                    )
                )

        return findings

    def read_content(self, file_path: Path) -> Optional[str]:
        """Read a file as lowercased text, or None if it should be skipped.

        Raises:
            TraversalError: If the file cannot be read.
        """
        try:
            if file_path.stat().st_size > self.max_file_bytes:
                logger.warning(f"Skipping file larger than {self.max_file_bytes} bytes: {file_path}")
                return None
            if is_binary_file(file_path):
                logger.debug(f"Skipping binary file: {file_path}")
                return None
            return file_path.read_text(encoding="utf-8", errors="ignore").lower()
        except OSError as e:
            raise TraversalError(f"Cannot read file {file_path}: {e}") from e

    def scan_file(self, file_path: str | Path, scan_cycle_id: int = 0) -> list[Finding]:
        """Read and inspect one file; read errors yield no findings."""
        file_path = Path(file_path)
        try:
            content = self.read_content(file_path)
        except TraversalError as e:
            logger.warning(str(e))
            return []
        if content is None:
            return []
        return self.inspect(file_path, content, scan_cycle_id)
