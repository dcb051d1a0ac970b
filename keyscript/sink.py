"""
Output sink: everything the engine is allowed to do to the outside world.

The engine only ever talks to an OutputSink. Every call is fire-and-forget
from the engine's point of view; implementations that touch a GUI must hand
the work over to the GUI thread instead of doing it on the caller's thread.
"""

from __future__ import annotations

from typing import Callable

from models import CaptureProfile


FailureCallback = Callable[[str], None]


class OutputSink:
    """Common interface for all sinks."""

    def emit_character(self, token: str) -> None:  # pragma: no cover - interface
        """Inject one keystroke (a character, SPACE_TOKEN or LINE_TERMINATOR)."""
        raise NotImplementedError

    def show_overlay_text(self, text: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def append_overlay_text(self, text: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def resize_overlay(self, width: int, height: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def start_recording(
        self, path: str, profile: CaptureProfile, on_failure: FailureCallback
    ) -> None:  # pragma: no cover - interface
        """
        Start capturing the screen into ``path`` without waiting for readiness.

        Launch failures and crashes are reported later through ``on_failure``,
        possibly from another thread.
        """
        raise NotImplementedError

    def stop_recording(self) -> None:  # pragma: no cover - interface
        """Stop the active recording; a no-op when none is running."""
        raise NotImplementedError

    def signal_completion(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def signal_fatal_error(self, reason: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError
