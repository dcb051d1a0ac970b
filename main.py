"""
Main entry point: run a keystroke script with the popup overlay.

Usage:
    python main.py demo.txt
"""

import sys
import tkinter as tk
from pathlib import Path
from typing import List, Optional

from desktop_sink import DesktopSink
from keyscript import ScriptEngine, ScriptSource
from keystrokes import KeystrokeSender
from logger import StatusLogger
from popup_overlay import PopupOverlay
from screen_recorder import ScreenRecorder
from settings_manager import SettingsManager


def _enable_high_dpi_awareness() -> None:
    if not sys.platform.startswith("win"):
        return

    try:
        import ctypes

        try:
            ctypes.windll.shcore.SetProcessDpiAwareness(2)
            return
        except AttributeError:
            pass

        try:
            ctypes.windll.user32.SetProcessDPIAware()
        except AttributeError:
            pass
    except Exception:
        # Ignore DPI awareness errors; Tk will fallback to default behaviour.
        pass


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv if argv is None else argv
    if len(args) != 2:
        print(f"Usage: {args[0] if args else 'main.py'} <filename>", file=sys.stderr)
        return 2

    _enable_high_dpi_awareness()
    logger = StatusLogger(echo=sys.stderr)
    settings = SettingsManager(logger=logger).load()

    root = tk.Tk()
    overlay = PopupOverlay(root, settings, logger)
    overlay.build()

    recorder = ScreenRecorder(settings, logger)
    sink = DesktopSink(KeystrokeSender.create(settings, logger), recorder, logger, overlay=overlay)
    engine = ScriptEngine(ScriptSource(Path(args[1])), sink, settings=settings, logger=logger)
    engine.start()

    try:
        root.mainloop()
    except KeyboardInterrupt:
        logger.log_info("Interrupted")
    finally:
        # #pause_forever leaves a recording running until the process goes away.
        recorder.stop()

    return 1 if overlay.exit_status == 1 else 0


if __name__ == "__main__":
    raise SystemExit(main())
