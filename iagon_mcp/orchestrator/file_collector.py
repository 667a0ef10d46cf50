"""File collection utilities for directory uploads."""
import logging
import re
from pathlib import Path
from typing import List, Optional, Pattern, Union

from ..errors import InputError

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> Pattern[str]:
    """
    Compile a shell-style name pattern.

    ``*`` matches any run of characters and ``?`` exactly one; everything
    else is literal. The match is anchored and case-insensitive.
    """
    if not pattern or not pattern.strip():
        raise InputError("include pattern must not be empty")

    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FileCollector:
    """Collects candidate files from a local directory."""

    @staticmethod
    def collect_files(
        folder: Union[str, Path],
        recursive: bool = False,
        pattern: Optional[str] = None,
    ) -> List[Path]:
        """
        Collect files under a folder.

        Args:
            folder: Root folder to scan
            recursive: Descend into subdirectories
            pattern: Optional glob filter applied to file base names

        Returns:
            Absolute file paths, depth first in name order. Empty if the
            folder does not exist.
        """
        root = Path(folder).expanduser().absolute()
        if not root.is_dir():
            return []

        matcher = compile_pattern(pattern) if pattern is not None else None
        files: List[Path] = []
        FileCollector._walk(root, recursive, matcher, files)
        return files

    @staticmethod
    def _walk(
        folder: Path,
        recursive: bool,
        matcher: Optional[Pattern[str]],
        files: List[Path],
    ) -> None:
        try:
            entries = sorted(folder.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Cannot read directory {folder}: {e}")
            return

        for entry in entries:
            try:
                if entry.is_dir():
                    if recursive and not entry.is_symlink():
                        FileCollector._walk(entry, recursive, matcher, files)
                    continue
                if not entry.is_file():
                    continue
            except OSError as e:
                logger.debug(f"Skipping {entry}: {e}")
                continue

            if matcher is not None and not matcher.fullmatch(entry.name):
                continue
            files.append(entry)
