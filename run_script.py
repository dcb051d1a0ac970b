"""
Small CLI to run a keystroke script without the popup window.

Popup directives are written to the log instead of a window.

Usage:
    python run_script.py demo.txt
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from desktop_sink import DesktopSink
from keyscript import ScriptEngine, ScriptSource
from keystrokes import KeystrokeSender
from logger import StatusLogger
from models import OutcomeKind
from screen_recorder import ScreenRecorder
from settings_manager import SettingsManager


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv if argv is None else argv
    if len(args) != 2:
        print(f"Usage: {args[0] if args else 'run_script.py'} <filename>", file=sys.stderr)
        return 2

    logger = StatusLogger(echo=sys.stderr)
    settings = SettingsManager(logger=logger).load()
    recorder = ScreenRecorder(settings, logger)
    sink = DesktopSink(KeystrokeSender.create(settings, logger), recorder, logger)
    engine = ScriptEngine(ScriptSource(Path(args[1])), sink, settings=settings, logger=logger)

    outcome = None
    try:
        engine.start()
        outcome = engine.join()
        if outcome is not None and outcome.kind == OutcomeKind.PAUSED:
            logger.log_info("Paused; press Ctrl+C to exit")
        # Paused runs stay alive until a recorder failure ends them.
        while not sink.finished.wait(timeout=0.5):
            pass
    except KeyboardInterrupt:
        logger.log_info("Interrupted")
    finally:
        recorder.stop()

    return 1 if sink.failure is not None else 0


if __name__ == "__main__":
    raise SystemExit(main())
