import pytest

pytest.importorskip("tkinter")

from models import ApplicationSettings
from popup_overlay import PopupOverlay


class FakeRoot:
    def __init__(self) -> None:
        self.scheduled = []
        self.geometries = []
        self.quit_called = False
        self.destroyed = False

    def after(self, ms, callback):
        self.scheduled.append((ms, callback))

    def geometry(self, spec):
        self.geometries.append(spec)

    def quit(self):
        self.quit_called = True

    def destroy(self):
        self.destroyed = True


class FakeLabel:
    def __init__(self) -> None:
        self.texts = []
        self.options = {}

    def configure(self, **kwargs):
        if "text" in kwargs:
            self.texts.append(kwargs["text"])
        self.options.update(kwargs)


def make_overlay():
    root = FakeRoot()
    overlay = PopupOverlay(root, ApplicationSettings(popup_margin=15), bounds_provider=lambda: (0, 0, 1920, 1080))
    label = FakeLabel()
    overlay._label = label
    return overlay, root, label


def test_append_twice_renders_two_lines() -> None:
    overlay, root, label = make_overlay()

    overlay.post_append("T1")
    overlay.post_append("T2")
    overlay._poll()

    assert label.texts == ["T1", "T1\nT2"]


def test_events_are_applied_in_order_and_poll_reschedules() -> None:
    overlay, root, label = make_overlay()

    overlay.post_text("a")
    overlay.post_append("b")
    overlay.post_text("c")
    overlay._poll()

    assert label.texts == ["a", "a\nb", "c"]
    assert root.scheduled == [(PopupOverlay.POLL_MS, overlay._poll)]


def test_empty_queue_still_reschedules() -> None:
    overlay, root, label = make_overlay()

    overlay._poll()

    assert label.texts == []
    assert len(root.scheduled) == 1


def test_resize_pins_window_to_bottom_right() -> None:
    overlay, root, label = make_overlay()

    overlay.post_resize(300, 200)
    overlay._poll()

    assert root.geometries == ["300x200+1620+880"]
    assert label.options["wraplength"] == 240


@pytest.mark.parametrize("status", [0, 1])
def test_close_stops_polling_and_keeps_exit_status(status) -> None:
    overlay, root, label = make_overlay()
    assert overlay.exit_status is None

    overlay.post_close(status)
    overlay.post_text("too late")
    overlay._poll()

    assert overlay.exit_status == status
    assert root.quit_called and root.destroyed
    assert root.scheduled == []
    assert label.texts == []
