"""Popup overlay that shows script-driven text on top of everything else."""

from __future__ import annotations

import queue
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Optional, Tuple

from logger import StatusLogger
from models import ApplicationSettings, PopupContent
from screen_geometry import bottom_right_origin, primary_screen_bounds


class PopupOverlay:
    """
    Frameless always-on-top window with a word-wrapping label.

    The engine thread never touches Tk: it posts events to a queue and the
    Tk loop drains it every POLL_MS.
    """

    POLL_MS = 30

    def __init__(
        self,
        root: tk.Tk,
        settings: Optional[ApplicationSettings] = None,
        logger: Optional[StatusLogger] = None,
        bounds_provider: Callable[[], Tuple[int, int, int, int]] = primary_screen_bounds,
    ) -> None:
        self._root = root
        self._settings = settings or ApplicationSettings()
        self._logger = logger or StatusLogger()
        self._bounds = bounds_provider
        self._content = PopupContent()
        self._events: "queue.Queue[Tuple[str, Any]]" = queue.Queue()
        self._label: Optional[tk.Label] = None
        self._exit_status: Optional[int] = None

    @property
    def exit_status(self) -> Optional[int]:
        """0 after completion, 1 after a fatal error, None while open."""
        return self._exit_status

    def build(self) -> None:
        """Create the widgets and start draining the event queue."""
        root = self._root
        root.title("keyscript")
        root.overrideredirect(True)
        root.attributes("-topmost", True)
        try:
            root.attributes("-type", "utility")
        except tk.TclError:
            # Only X11 window managers know about window types.
            pass

        margin = self._settings.popup_margin
        group = ttk.LabelFrame(root)
        group.pack(fill=tk.BOTH, expand=True, padx=margin, pady=margin)
        self._label = tk.Label(
            group,
            text="",
            anchor="nw",
            justify=tk.LEFT,
            font=("Segoe UI", self._settings.popup_font_size),
        )
        self._label.pack(fill=tk.BOTH, expand=True, padx=margin, pady=margin)
        root.update_idletasks()
        root.after(self.POLL_MS, self._poll)

    # ------------------------------------------------------------------
    # Thread-safe API used by the sink
    # ------------------------------------------------------------------
    def post_text(self, text: str) -> None:
        self._events.put(("text", text))

    def post_append(self, text: str) -> None:
        self._events.put(("append", text))

    def post_resize(self, width: int, height: int) -> None:
        self._events.put(("resize", (width, height)))

    def post_close(self, exit_status: int) -> None:
        self._events.put(("close", exit_status))

    # ------------------------------------------------------------------
    # Tk thread
    # ------------------------------------------------------------------
    def _poll(self) -> None:
        while True:
            try:
                kind, payload = self._events.get_nowait()
            except queue.Empty:
                break
            if kind == "text":
                self._set_text(self._content.show(payload))
            elif kind == "append":
                self._set_text(self._content.append(payload))
            elif kind == "resize":
                self._resize(*payload)
            elif kind == "close":
                self._close(payload)
                return
        self._root.after(self.POLL_MS, self._poll)

    def _set_text(self, text: str) -> None:
        if self._label is not None:
            self._label.configure(text=text)

    def _resize(self, width: int, height: int) -> None:
        x, y = bottom_right_origin(width, height, self._bounds())
        self._root.geometry(f"{int(width)}x{int(height)}+{int(x)}+{int(y)}")
        if self._label is not None:
            self._label.configure(wraplength=max(width - 4 * self._settings.popup_margin, 1))

    def _close(self, exit_status: int) -> None:
        self._exit_status = exit_status
        try:
            self._root.quit()
            self._root.destroy()
        except tk.TclError as e:
            self._logger.log_warning(f"Closing the popup failed: {e}")
