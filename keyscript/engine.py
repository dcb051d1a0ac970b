"""
Script engine that executes a keystroke script in a worker thread.
"""

from __future__ import annotations

import os
import threading
import time
from typing import Callable, Optional

from logger import StatusLogger
from models import ApplicationSettings, ExecutionState, OutcomeKind, RunOutcome

from .directives import (
    AppendOverlay,
    Comment,
    Directive,
    LINE_TERMINATOR,
    ParseError,
    PauseForever,
    Quit,
    ResizeOverlay,
    SetInterval,
    ShowOverlay,
    Sleep,
    StartRecording,
    TypeLine,
    keystroke_token,
    parse_line,
)
from .script_model import ScriptOpenError, ScriptSource
from .sink import OutputSink


class ScriptEngine:
    """
    Runs one script against an OutputSink, strictly one directive at a time.

    ``run()`` executes on the calling thread; ``start()`` moves it to a daemon
    worker so a GUI loop can keep running. The only way to interrupt a run is
    ``report_fatal_error()``, which the recorder calls when ffmpeg dies.
    """

    def __init__(
        self,
        source: ScriptSource,
        sink: OutputSink,
        settings: Optional[ApplicationSettings] = None,
        logger: Optional[StatusLogger] = None,
        sleep_hook: Optional[Callable[[float], None]] = None,
    ):
        self._source = source
        self._sink = sink
        self._settings = settings or ApplicationSettings()
        self._logger = logger or StatusLogger()
        self._sleep = sleep_hook
        self._thread: Optional[threading.Thread] = None
        self._fatal = threading.Event()
        self._fatal_reason: Optional[str] = None
        self._fatal_lock = threading.Lock()
        self._state: Optional[ExecutionState] = None
        self._outcome: Optional[RunOutcome] = None
        self._on_done: Optional[Callable[[RunOutcome], None]] = None
        self._paused_aborted = False

    def on_done(self, cb: Callable[[RunOutcome], None]) -> None:
        self._on_done = cb

    @property
    def state(self) -> Optional[ExecutionState]:
        return self._state

    @property
    def outcome(self) -> Optional[RunOutcome]:
        return self._outcome

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._worker, name="keyscript-engine", daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> Optional[RunOutcome]:
        if self._thread:
            self._thread.join(timeout)
        return self._outcome

    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def report_fatal_error(self, reason: str) -> None:
        """
        Ask the run to stop; safe to call from any thread. First reason wins.

        A paused run has no loop left to notice the request, so the recording
        is released and the fatal error signalled right here.
        """
        with self._fatal_lock:
            if self._fatal_reason is None:
                self._fatal_reason = reason
            self._fatal.set()
            paused = self._outcome is not None and self._outcome.kind == OutcomeKind.PAUSED
        if paused:
            self._abort_paused()

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------
    def run(self) -> RunOutcome:
        with self._fatal_lock:
            self._fatal.clear()
            self._fatal_reason = None
            self._outcome = None
            self._paused_aborted = False
        state = ExecutionState(
            key_interval_ms=self._settings.key_interval_ms,
            line_interval_ms=self._settings.line_interval_ms,
        )
        self._state = state
        outcome = self._run(state)
        with self._fatal_lock:
            self._outcome = outcome
            late_failure = outcome.kind == OutcomeKind.PAUSED and self._fatal.is_set()
        self._logger.log_info(f"Run finished ({outcome})")
        if late_failure:
            self._abort_paused()
        return self._outcome

    def _abort_paused(self) -> None:
        with self._fatal_lock:
            if self._paused_aborted:
                return
            self._paused_aborted = True
        outcome = self._abort(self._state)
        with self._fatal_lock:
            self._outcome = outcome

    def _worker(self) -> None:
        try:
            outcome = self.run()
        except Exception as e:
            reason = f"Error: {e}"
            self._logger.log_error(f"Run crashed: {reason}")
            outcome = RunOutcome(OutcomeKind.FATAL_ERROR, reason)
            self._outcome = outcome
            try:
                self._sink.signal_fatal_error(reason)
            except Exception as sink_error:
                self._logger.log_error(f"Could not signal the failure: {sink_error}")
        self._finish(outcome)

    def _finish(self, outcome: RunOutcome) -> None:
        if self._on_done:
            try:
                self._on_done(outcome)
            except Exception as e:
                self._logger.log_warning(f"on_done callback failed: {e}")

    def _run(self, state: ExecutionState) -> RunOutcome:
        try:
            lines = self._source.read_lines()
        except ScriptOpenError as e:
            self._logger.log_error(str(e))
            self._sink.signal_fatal_error(str(e))
            return RunOutcome(OutcomeKind.FATAL_ERROR, str(e))

        self._logger.log_info(f"Processing script {self._source.name}")
        try:
            for number, line in enumerate(lines, start=1):
                if self._fatal.is_set():
                    break
                state.current_line = number
                try:
                    directive = parse_line(line)
                except ParseError as e:
                    self._logger.log_warning(f"Line {number} skipped: {e}")
                    continue
                outcome = self._dispatch(directive, state)
                if outcome is not None:
                    return outcome
        except Exception as e:
            self.report_fatal_error(f"Error on line {state.current_line}: {e}")

        if self._fatal.is_set():
            return self._abort(state)

        self._release_recording(state)
        self._sink.signal_completion()
        return RunOutcome(OutcomeKind.COMPLETED)

    def _abort(self, state: ExecutionState) -> RunOutcome:
        reason = self._fatal_reason or "Unknown error"
        self._logger.log_error(f"Run aborted: {reason}")
        self._release_recording(state)
        self._sink.signal_fatal_error(reason)
        return RunOutcome(OutcomeKind.FATAL_ERROR, reason)

    # ------------------------------------------------------------------
    # Directive handlers
    # ------------------------------------------------------------------
    def _dispatch(self, directive: Directive, state: ExecutionState) -> Optional[RunOutcome]:
        """Execute one directive; returns an outcome when it ends the run."""
        if isinstance(directive, Comment):
            return None
        if isinstance(directive, TypeLine):
            self._type_line(directive.text, state)
        elif isinstance(directive, SetInterval):
            state.key_interval_ms = directive.key
            state.line_interval_ms = directive.line
            self._logger.log_debug(f"Interval set to {directive.key}ms / {directive.line}ms")
        elif isinstance(directive, Sleep):
            self._sleep_ms(directive.duration_ms)
        elif isinstance(directive, ShowOverlay):
            if directive.text or not self._settings.suppress_empty_popup:
                self._sink.show_overlay_text(directive.text)
        elif isinstance(directive, AppendOverlay):
            self._sink.append_overlay_text(directive.text)
        elif isinstance(directive, ResizeOverlay):
            self._sink.resize_overlay(directive.width, directive.height)
        elif isinstance(directive, StartRecording):
            self._start_recording(directive.path, state)
        elif isinstance(directive, Quit):
            self._logger.log_info("Quitting")
            self._stop_recording(state)
            self._sink.signal_completion()
            return RunOutcome(OutcomeKind.QUIT)
        elif isinstance(directive, PauseForever):
            self._logger.log_info("Pausing forever")
            state.paused = True
            return RunOutcome(OutcomeKind.PAUSED)
        return None

    def _type_line(self, text: str, state: ExecutionState) -> None:
        for ch in text:
            if self._fatal.is_set():
                return
            self._sink.emit_character(keystroke_token(ch))
            self._sleep_ms(state.key_interval_ms)
        if self._fatal.is_set():
            return
        self._sink.emit_character(LINE_TERMINATOR)
        self._sleep_ms(state.line_interval_ms)

    def _start_recording(self, path: str, state: ExecutionState) -> None:
        if state.recording_active:
            self._stop_recording(state)
        if os.path.exists(path):
            try:
                os.remove(path)
            except OSError as e:
                self._logger.log_warning(f"Could not remove old recording {path}: {e}")
        self._logger.log_info(f"Recording to {path}")
        self._sink.start_recording(path, self._settings.capture_profile(), self.report_fatal_error)
        state.recording_active = True

    def _stop_recording(self, state: ExecutionState) -> None:
        try:
            self._sink.stop_recording()
        except Exception as e:
            self._logger.log_warning(f"Stopping the recording failed: {e}")
        state.recording_active = False

    def _release_recording(self, state: ExecutionState) -> None:
        if state.recording_active:
            self._stop_recording(state)

    def _sleep_ms(self, ms: int) -> None:
        if ms <= 0:
            return
        if self._sleep:
            self._sleep(ms / 1000.0)
        else:
            # A fatal error wakes the run up early.
            deadline = time.monotonic() + ms / 1000.0
            remaining = ms / 1000.0
            while remaining > 0 and not self._fatal.wait(remaining):
                remaining = deadline - time.monotonic()
