"""Utility for walking source trees."""

import logging
import os
from pathlib import Path
from typing import Generator, Iterable, Optional

from .errors import TraversalError

logger = logging.getLogger(__name__)


# Version control, dependency caches and build output
DEFAULT_IGNORE_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    ".svn",
    ".hg",
    "dist",
    "build",
    "out",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".venv",
    "venv",
    ".next",
    ".nuxt",
    "coverage",
    "vendor",
    "target",
    ".DS_Store",
})

DEFAULT_EXTENSIONS: frozenset[str] = frozenset({
    ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".json",
    ".py", ".swift", ".m", ".h", ".c", ".cpp", ".java", ".kt",
    ".php", ".rb", ".go", ".rs", ".sh",
    ".html", ".xml", ".yml", ".yaml",
})


def _normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith(".") else f".{ext}")
    return frozenset(normalized)


class FileWalker:
    """Enumerates scannable files under a root directory.

    Each call to walk() is a fresh traversal. Directories whose base name is in
    the ignore set are never descended into, and only files whose suffix is in
    the extension allow-list are yielded.
    """

    def __init__(
        self,
        ignore_dirs: Optional[Iterable[str]] = None,
        extensions: Optional[Iterable[str]] = None,
    ):
        self.ignore_dirs = frozenset(ignore_dirs) if ignore_dirs is not None else DEFAULT_IGNORE_DIRS
        self.extensions = (
            _normalize_extensions(extensions) if extensions is not None else DEFAULT_EXTENSIONS
        )

    def is_scannable(self, path: str | Path) -> bool:
        return Path(path).suffix.lower() in self.extensions

    def walk(self, root: str | Path) -> Generator[Path, None, None]:
        """Walk a tree yielding files that should be scanned.

        Args:
            root: Directory to traverse.

        Yields:
            Path objects for matching files, each exactly once.
        """
        root = Path(root)

        def _on_error(error: OSError) -> None:
            failure = TraversalError(f"Cannot read directory {error.filename}: {error.strerror}")
            logger.warning(f"Skipping subtree: {failure}")

        for dirpath, dirs, files in os.walk(root, onerror=_on_error, followlinks=False):
            dirs[:] = [d for d in dirs if d not in self.ignore_dirs]
            for name in files:
                if self.is_scannable(name):
                    yield Path(dirpath) / name
