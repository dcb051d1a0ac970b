"""
Domain models for the keyscript runner.
Each class follows the Single Responsibility Principle (SRP).
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Any, Optional


class OutcomeKind(Enum):
    """Enumeration of the ways a script run can end."""
    COMPLETED = "completed"
    QUIT = "quit"
    PAUSED = "paused"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class RunOutcome:
    """Terminal result of one script run."""
    kind: OutcomeKind
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind != OutcomeKind.FATAL_ERROR

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.reason}" if self.reason else self.kind.value


@dataclass
class ExecutionState:
    """
    Mutable timing/session state of a single run.

    Owned by the engine; only directive handlers change it.
    """
    key_interval_ms: int = 40
    line_interval_ms: int = 100
    recording_active: bool = False
    paused: bool = False
    current_line: int = 0

    def __post_init__(self):
        if self.key_interval_ms < 0 or self.line_interval_ms < 0:
            raise ValueError("Intervals cannot be negative")


@dataclass(frozen=True)
class CaptureProfile:
    """Fixed capture settings handed to the screen recorder."""
    framerate: int = 30
    full_screen: bool = True
    lossless: bool = True


class PopupContent:
    """Text model behind the popup overlay."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def show(self, text: str) -> str:
        """Replace the whole text."""
        self._text = text
        return self._text

    def append(self, text: str) -> str:
        """Add text on a new line below the current content."""
        self._text = f"{self._text}\n{text}" if self._text else text
        return self._text


@dataclass
class ApplicationSettings:
    """User configuration loaded from settings.json."""

    key_interval_ms: int = 40
    line_interval_ms: int = 100
    suppress_empty_popup: bool = False
    keystroke_backend: str = "auto"  # auto|xvkbd|pynput|pywinauto
    xvkbd_command: str = "xvkbd"
    ffmpeg_command: str = "ffmpeg"
    recording_framerate: int = 30
    recording_lossless: bool = True
    popup_margin: int = 15
    popup_font_size: int = 14

    def capture_profile(self) -> CaptureProfile:
        """Build the capture profile used for every #record directive."""
        return CaptureProfile(
            framerate=self.recording_framerate,
            full_screen=True,
            lossless=self.recording_lossless,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to primitive types for JSON storage."""
        return {
            "key_interval_ms": self.key_interval_ms,
            "line_interval_ms": self.line_interval_ms,
            "suppress_empty_popup": self.suppress_empty_popup,
            "keystroke_backend": self.keystroke_backend,
            "xvkbd_command": self.xvkbd_command,
            "ffmpeg_command": self.ffmpeg_command,
            "recording_framerate": self.recording_framerate,
            "recording_lossless": self.recording_lossless,
            "popup_margin": self.popup_margin,
            "popup_font_size": self.popup_font_size,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ApplicationSettings":
        """Create settings instance from JSON dictionary."""
        backend = str(data.get("keystroke_backend", "auto") or "auto").strip().lower()
        if backend not in ("auto", "xvkbd", "pynput", "pywinauto"):
            raise ValueError(f"Unknown keystroke backend: {backend}")

        return ApplicationSettings(
            key_interval_ms=max(0, int(data.get("key_interval_ms", 40) or 0)),
            line_interval_ms=max(0, int(data.get("line_interval_ms", 100) or 0)),
            suppress_empty_popup=bool(data.get("suppress_empty_popup", False)),
            keystroke_backend=backend,
            xvkbd_command=str(data.get("xvkbd_command", "xvkbd") or "xvkbd"),
            ffmpeg_command=str(data.get("ffmpeg_command", "ffmpeg") or "ffmpeg"),
            recording_framerate=max(1, int(data.get("recording_framerate", 30) or 30)),
            recording_lossless=bool(data.get("recording_lossless", True)),
            popup_margin=max(0, int(data.get("popup_margin", 15) or 0)),
            popup_font_size=max(6, int(data.get("popup_font_size", 14) or 14)),
        )
