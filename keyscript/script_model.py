"""
Script source: where the lines of a run come from.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union


class ScriptOpenError(Exception):
    pass


class ScriptSource:
    """A script file (or in-memory text) read as UTF-8 lines."""

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        text: Optional[str] = None,
        name: Optional[str] = None,
    ):
        if path is None and text is None:
            raise ValueError("ScriptSource needs a path or text")
        self._path = Path(path) if path is not None else None
        self._text = text
        self._name = name

    @staticmethod
    def from_text(text: str, name: str = "<memory>") -> "ScriptSource":
        return ScriptSource(text=text, name=name)

    @property
    def name(self) -> str:
        if self._name:
            return self._name
        return str(self._path) if self._path is not None else "<memory>"

    def read_lines(self) -> List[str]:
        """Return the script lines without their terminators (LF or CRLF)."""
        if self._text is not None:
            content = self._text
        else:
            try:
                content = self._path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ScriptOpenError(f"Failed to open {self._path}: {e}")

        if not content:
            return []
        # str.splitlines() would also break on form feeds and other separators
        # that belong to the typed text.
        lines = content.split("\n")
        if content.endswith("\n"):
            lines.pop()
        return [line[:-1] if line.endswith("\r") else line for line in lines]
