"""
Screen recorder: one ffmpeg capture process at a time.

Starting never waits for ffmpeg to come up. A watcher thread reports a
launch failure or an exit that ``stop()`` did not ask for through the
``on_failure`` callback given to ``start()``.
"""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Tuple

from logger import StatusLogger
from models import ApplicationSettings, CaptureProfile
from screen_geometry import primary_screen_bounds


class RecordingError(Exception):
    pass


def build_ffmpeg_command(
    ffmpeg: str,
    path: str,
    profile: CaptureProfile,
    bounds: Tuple[int, int, int, int],
    platform: str = sys.platform,
    display: Optional[str] = None,
) -> List[str]:
    """Build the capture command line for the current platform."""
    x, y, width, height = bounds
    cmd = [ffmpeg, "-y", "-hide_banner", "-nostats", "-loglevel", "error"]
    if platform.startswith("win"):
        cmd += ["-f", "gdigrab", "-framerate", str(profile.framerate)]
        if not profile.full_screen:
            cmd += ["-offset_x", str(x), "-offset_y", str(y), "-video_size", f"{width}x{height}"]
        cmd += ["-i", "desktop"]
    else:
        display = display or os.environ.get("DISPLAY", ":0")
        cmd += [
            "-f", "x11grab",
            "-framerate", str(profile.framerate),
            "-video_size", f"{width}x{height}",
            "-i", f"{display}+{x},{y}",
        ]
    cmd += ["-c:v", "libx264", "-preset", "ultrafast"]
    if profile.lossless:
        cmd += ["-qp", "0"]
    else:
        cmd += ["-pix_fmt", "yuv420p"]
    cmd.append(path)
    return cmd


class ScreenRecorder:
    """Owns the ffmpeg process of the active recording."""

    STOP_TIMEOUT = 5.0
    STDERR_TAIL_LINES = 20

    def __init__(
        self,
        settings: Optional[ApplicationSettings] = None,
        logger: Optional[StatusLogger] = None,
        popen: Callable[..., Any] = subprocess.Popen,
        bounds_provider: Callable[[], Tuple[int, int, int, int]] = primary_screen_bounds,
    ) -> None:
        self._settings = settings or ApplicationSettings()
        self._logger = logger or StatusLogger()
        self._popen = popen
        self._bounds = bounds_provider
        self._process: Optional[Any] = None
        self._watcher: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def is_recording(self) -> bool:
        with self._lock:
            return self._process is not None and self._process.poll() is None

    def start(self, path: str, profile: CaptureProfile, on_failure: Callable[[str], None]) -> None:
        """Launch ffmpeg for ``path``; failures go to ``on_failure``, never raised."""
        self.stop()
        cmd = build_ffmpeg_command(self._settings.ffmpeg_command, path, profile, self._bounds())
        self._logger.log_debug("Starting recorder: " + " ".join(cmd))
        try:
            process = self._popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            error = RecordingError(f"Failed to start '{self._settings.ffmpeg_command}': {e}")
            self._logger.log_error(str(error))
            on_failure(str(error))
            return

        with self._lock:
            self._process = process
        self._watcher = threading.Thread(
            target=self._watch, args=(process, path, on_failure), name="keyscript-recorder", daemon=True
        )
        self._watcher.start()

    def stop(self) -> None:
        """Ask ffmpeg to finish the file; terminate it if it does not listen."""
        with self._lock:
            process, self._process = self._process, None
        if process is None:
            return
        if process.poll() is None:
            try:
                process.stdin.write(b"q")
                process.stdin.flush()
                process.stdin.close()
            except (OSError, ValueError):
                pass
            try:
                process.wait(timeout=self.STOP_TIMEOUT)
            except subprocess.TimeoutExpired:
                self._logger.log_warning("Recorder did not stop in time, terminating")
                process.terminate()
                try:
                    process.wait(timeout=self.STOP_TIMEOUT)
                except subprocess.TimeoutExpired:
                    process.kill()
        self._logger.log_info("Recording stopped")

    def _watch(self, process: Any, path: str, on_failure: Callable[[str], None]) -> None:
        # Keep reading stderr while ffmpeg runs; a full pipe would stall it
        # before it ever sees the "q" sent by stop().
        tail: Deque[str] = deque(maxlen=self.STDERR_TAIL_LINES)
        if process.stderr is not None:
            try:
                for raw in process.stderr:
                    line = raw.decode("utf-8", "replace").strip()
                    if line:
                        tail.append(line)
            except (OSError, ValueError):
                pass
        code = process.wait()
        with self._lock:
            if self._process is not process:
                # stop() already took the process over.
                return
            self._process = None
        reason = f"Recorder for {path} exited unexpectedly with code {code}"
        if tail:
            reason += f": {tail[-1]}"
        self._logger.log_error(reason)
        on_failure(reason)
