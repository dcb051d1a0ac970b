"""
Desktop sink: the concrete OutputSink used by the entry points.

Keystrokes are injected on the engine thread, recording goes to the
ScreenRecorder, and popup updates are posted to the PopupOverlay queue.
Without an overlay (headless runs) popup updates only show up in the log.
"""

from __future__ import annotations

import threading
from typing import Any, Optional

from keyscript.sink import FailureCallback, OutputSink
from keystrokes import KeystrokeError, KeystrokeSender
from logger import StatusLogger
from models import CaptureProfile
from screen_recorder import ScreenRecorder


class DesktopSink(OutputSink):
    def __init__(
        self,
        keystrokes: KeystrokeSender,
        recorder: ScreenRecorder,
        logger: StatusLogger,
        overlay: Optional[Any] = None,
    ) -> None:
        self._keys = keystrokes
        self._recorder = recorder
        self._logger = logger
        self._overlay = overlay
        self._finished = threading.Event()
        self._failure: Optional[str] = None

    @property
    def finished(self) -> threading.Event:
        """Set once a terminal signal has been delivered."""
        return self._finished

    @property
    def failure(self) -> Optional[str]:
        return self._failure

    def emit_character(self, token: str) -> None:
        try:
            self._keys.send(token)
        except (KeystrokeError, OSError) as e:
            # A dropped keystroke does not stop the run.
            self._logger.log_warning(f"Keystroke {token!r} failed: {e}")

    def show_overlay_text(self, text: str) -> None:
        if self._overlay is not None:
            self._overlay.post_text(text)
        else:
            self._logger.log_info(f"[popup] {text}")

    def append_overlay_text(self, text: str) -> None:
        if self._overlay is not None:
            self._overlay.post_append(text)
        else:
            self._logger.log_info(f"[popup+] {text}")

    def resize_overlay(self, width: int, height: int) -> None:
        if self._overlay is not None:
            self._overlay.post_resize(width, height)
        else:
            self._logger.log_info(f"[popup] resize to {width}x{height}")

    def start_recording(self, path: str, profile: CaptureProfile, on_failure: FailureCallback) -> None:
        self._recorder.start(path, profile, on_failure)

    def stop_recording(self) -> None:
        self._recorder.stop()

    def signal_completion(self) -> None:
        self._finish(None)

    def signal_fatal_error(self, reason: str) -> None:
        self._finish(reason)

    def _finish(self, failure: Optional[str]) -> None:
        if self._finished.is_set():
            return
        self._failure = failure
        self._finished.set()
        if self._overlay is not None:
            self._overlay.post_close(0 if failure is None else 1)
