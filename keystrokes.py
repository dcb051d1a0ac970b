"""
Keystroke injection backends.

The engine hands over one token per keystroke: a literal character,
SPACE_TOKEN, BACKSLASH_TOKEN or LINE_TERMINATOR. Backends:

- xvkbd:     shells out to ``xvkbd -xsendevent -text <token>`` (X11); the
             tokens are already in xvkbd's escape syntax.
- pywinauto: Windows, via pywinauto.keyboard.send_keys.
- pynput:    any platform with a keyboard controller (focused window only).
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from typing import Any, Callable, Optional, Tuple

from keyscript.directives import BACKSLASH_TOKEN, LINE_TERMINATOR, SPACE_TOKEN
from logger import StatusLogger
from models import ApplicationSettings


class KeystrokeError(Exception):
    pass


class KeystrokeSender:
    """Common interface for all keystroke backends."""

    name = "base"

    def send(self, token: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @staticmethod
    def create(settings: ApplicationSettings, logger: Optional[StatusLogger] = None) -> "KeystrokeSender":
        backend = settings.keystroke_backend
        if backend == "auto":
            if sys.platform.startswith("win"):
                backend = "pywinauto"
            elif shutil.which(settings.xvkbd_command):
                backend = "xvkbd"
            else:
                backend = "pynput"
        if logger:
            logger.log_debug(f"Keystroke backend: {backend}")
        if backend == "xvkbd":
            return XvkbdSender(settings.xvkbd_command)
        if backend == "pywinauto":
            return PywinautoSender()
        if backend == "pynput":
            return PynputSender()
        raise KeystrokeError(f"Unknown keystroke backend: {backend}")


class XvkbdSender(KeystrokeSender):
    name = "xvkbd"

    def __init__(self, command: str = "xvkbd", runner: Callable[..., Any] = subprocess.run):
        self._command = command
        self._run = runner

    def build_command(self, token: str) -> list:
        return [self._command, "-xsendevent", "-text", token]

    def send(self, token: str) -> None:
        try:
            result = self._run(
                self.build_command(token),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            raise KeystrokeError(f"Failed to run '{self._command}': {e}")
        if result.returncode != 0:
            raise KeystrokeError(f"{self._command} exited with code {result.returncode} for {token!r}")


_PYWINAUTO_SPECIAL = set("{}+^%~()")


class PywinautoSender(KeystrokeSender):
    name = "pywinauto"

    @staticmethod
    def translate(token: str) -> str:
        if token == SPACE_TOKEN:
            return "{SPACE}"
        if token == LINE_TERMINATOR:
            return "{ENTER}"
        if token == BACKSLASH_TOKEN:
            return "\\"
        if token in _PYWINAUTO_SPECIAL:
            return "{" + token + "}"
        return token

    def send(self, token: str) -> None:
        try:
            from pywinauto.keyboard import send_keys as pw_send_keys  # type: ignore
        except Exception as e:
            raise KeystrokeError(f"pywinauto is not available: {e}")
        try:
            pw_send_keys(self.translate(token), with_spaces=True, pause=0.0)
        except Exception as e:
            raise KeystrokeError(f"pywinauto send_keys failed for {token!r}: {e}")


class PynputSender(KeystrokeSender):
    name = "pynput"

    def __init__(self) -> None:
        self._kb: Optional[Any] = None
        self._key_mod: Optional[Any] = None

    def send(self, token: str) -> None:
        if self._kb is None:
            kb_cls, self._key_mod = _get_pynput()
            if kb_cls is None or self._key_mod is None:
                raise KeystrokeError("No keyboard backend available (install pynput)")
            self._kb = kb_cls()
        try:
            if token == SPACE_TOKEN:
                self._tap(self._key_mod.space)
            elif token == LINE_TERMINATOR:
                self._tap(self._key_mod.enter)
            elif token == BACKSLASH_TOKEN:
                self._kb.type("\\")
            else:
                self._kb.type(token)
        except Exception as e:
            # e.g. InvalidCharacterException for characters missing from the layout
            raise KeystrokeError(f"pynput could not type {token!r}: {e}")

    def _tap(self, key: Any) -> None:
        self._kb.press(key)
        self._kb.release(key)


def _get_pynput() -> Tuple[Optional[Any], Optional[Any]]:
    """Import pynput lazily and return (KeyboardControllerClass, KeyModule)."""
    try:
        from pynput.keyboard import Controller as KeyboardController, Key as KeyModule  # type: ignore
        return KeyboardController, KeyModule
    except Exception:
        return None, None
