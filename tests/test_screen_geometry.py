import sys
from types import SimpleNamespace

from screen_geometry import bottom_right_origin, primary_screen_bounds


def test_bottom_right_origin() -> None:
    assert bottom_right_origin(300, 200, (0, 0, 1920, 1080)) == (1620, 880)


def test_bottom_right_origin_respects_screen_offset() -> None:
    assert bottom_right_origin(100, 100, (1920, 0, 1280, 1024)) == (3100, 924)


def test_oversized_window_is_pinned_to_origin() -> None:
    assert bottom_right_origin(4000, 3000, (0, 0, 1920, 1080)) == (0, 0)


def test_primary_monitor_is_preferred(monkeypatch) -> None:
    monitors = [
        SimpleNamespace(x=1920, y=0, width=1280, height=1024, is_primary=False),
        SimpleNamespace(x=0, y=0, width=1920, height=1080, is_primary=True),
    ]
    monkeypatch.setitem(sys.modules, "screeninfo", SimpleNamespace(get_monitors=lambda: monitors))

    assert primary_screen_bounds() == (0, 0, 1920, 1080)
