#!/usr/bin/env python3
"""
Line Source Module
Line-oriented access to SMD text, from content roots or plain paths.
"""

from pathlib import Path
from typing import Iterable, List, Optional

COMMENT_PREFIXES = ('#', ';')


class LineSource:
    """Reads trimmed lines from text that has been loaded in full

    Files are read completely up front; parsing never streams.
    """

    def __init__(self, lines: Iterable[str], path: Optional[Path] = None):
        self._lines: List[str] = list(lines)
        self._position = 0
        self.path = path

    @classmethod
    def from_text(cls, text: str, path: Optional[Path] = None) -> 'LineSource':
        return cls(text.splitlines(), path)

    @classmethod
    def from_file(cls, path) -> 'LineSource':
        path = Path(path)
        with open(path, 'r', encoding='utf-8-sig', errors='replace') as f:
            content = f.read()
        return cls.from_text(content, path)

    def eof(self) -> bool:
        return self._position >= len(self._lines)

    def read_raw_line(self) -> str:
        """Return the next line with surrounding whitespace removed"""
        line = self._lines[self._position].strip()
        self._position += 1
        return line

    def read_line(self) -> Optional[str]:
        """Next trimmed, non-empty line with comment lines skipped

        Returns:
            str: The line, or None once the source is exhausted
        """
        while not self.eof():
            line = self.read_raw_line()
            if not line or line.startswith(COMMENT_PREFIXES):
                continue
            return line
        return None


def open_logical(file_path, search_paths: Optional[Iterable] = None) -> Optional[LineSource]:
    """Open a path relative to the configured content roots

    Args:
        file_path: Relative (logical) model path, e.g. "models/player.smd"
        search_paths: Content root directories, searched in order

    Returns:
        LineSource for the first root containing the file, None otherwise
    """
    relative = Path(file_path)
    if relative.is_absolute():
        return None

    for root in search_paths or []:
        candidate = Path(root) / relative
        if candidate.is_file():
            try:
                return LineSource.from_file(candidate)
            except OSError:
                continue
    return None


def open_system(file_path) -> Optional[LineSource]:
    """Open a raw file system path, None if it cannot be read"""
    try:
        return LineSource.from_file(file_path)
    except OSError:
        return None
