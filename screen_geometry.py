"""Primary screen bounds, shared by the popup overlay and the recorder."""

from __future__ import annotations

from typing import Tuple

FALLBACK_BOUNDS = (0, 0, 1280, 800)


def primary_screen_bounds() -> Tuple[int, int, int, int]:
    """Return (x, y, width, height) of the primary monitor."""
    try:
        from screeninfo import get_monitors  # type: ignore
        mons = get_monitors()
        if not mons:
            raise RuntimeError("no monitors reported")
        primary = next((m for m in mons if getattr(m, "is_primary", False)), mons[0])
        return int(primary.x), int(primary.y), int(primary.width), int(primary.height)
    except Exception:
        # Fallback to pyautogui's single screen size
        try:
            import pyautogui  # local import: needs a display at import time
            width, height = pyautogui.size()
            return 0, 0, int(width), int(height)
        except Exception:
            return FALLBACK_BOUNDS


def bottom_right_origin(width: int, height: int, bounds: Tuple[int, int, int, int]) -> Tuple[int, int]:
    """Top-left corner that puts a width x height window in the bottom-right corner."""
    x, y, screen_w, screen_h = bounds
    return x + max(screen_w - width, 0), y + max(screen_h - height, 0)
