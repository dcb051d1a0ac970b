import pytest

from keyscript.directives import (
    BACKSLASH_TOKEN,
    LINE_TERMINATOR,
    SPACE_TOKEN,
    AppendOverlay,
    Comment,
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
    normalize_overlay_text,
    parse_line,
)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("", Comment()),
        ("   ", Comment()),
        ("## just a note", Comment()),
        ("##", Comment()),
        ("#interval 10 250", SetInterval(key=10, line=250)),
        ("#sleep 500", Sleep(duration_ms=500)),
        ("#popup Hello", ShowOverlay(text="Hello")),
        ("#popup   padded   ", ShowOverlay(text="padded")),
        ("#popup one\\ntwo", ShowOverlay(text="one\ntwo")),
        ("#popup", ShowOverlay(text="")),
        ("#popup_append Step 2", AppendOverlay(text="Step 2")),
        ("#popup_append   indented ", AppendOverlay(text="  indented ")),
        ("#popup_append a\\nb", AppendOverlay(text="a\nb")),
        ("#resize_popup 300 200", ResizeOverlay(width=300, height=200)),
        ("#record out.mp4", StartRecording(path="out.mp4")),
        ("#quit", Quit()),
        ("#pause_forever", PauseForever()),
        ("echo hello", TypeLine(text="echo hello")),
        ("  indented command  ", TypeLine(text="  indented command  ")),
        ("#include <stdio.h>", TypeLine(text="#include <stdio.h>")),
        ("# single hash comment is typed", TypeLine(text="# single hash comment is typed")),
    ],
)
def test_parse_line(line, expected) -> None:
    assert parse_line(line) == expected


def test_popup_append_is_not_mistaken_for_popup() -> None:
    assert isinstance(parse_line("#popup_append x"), AppendOverlay)
    assert isinstance(parse_line("#popup_appendX"), AppendOverlay)


def test_keywords_match_by_prefix() -> None:
    assert parse_line("#quitnow") == Quit()
    assert parse_line("#pause_forever please") == PauseForever()
    assert parse_line("#sleep 5 extra") == Sleep(duration_ms=5)


def test_record_uses_second_token_only() -> None:
    assert parse_line("#record /tmp/demo.mp4 trailing") == StartRecording(path="/tmp/demo.mp4")


@pytest.mark.parametrize(
    "line",
    [
        "#interval",
        "#interval 10",
        "#interval ten 20",
        "#interval -1 20",
        "#sleep",
        "#sleep soon",
        "#resize_popup 300",
        "#resize_popup wide 200",
        "#record",
        "#record ",
    ],
)
def test_malformed_arguments_raise_parse_error(line) -> None:
    with pytest.raises(ParseError):
        parse_line(line)


def test_double_space_leaves_empty_token() -> None:
    # Lines are split on single spaces, so a doubled separator is an empty argument.
    with pytest.raises(ParseError):
        parse_line("#interval  10 20")


def test_keystroke_token_escapes_space() -> None:
    assert keystroke_token(" ") == SPACE_TOKEN
    assert keystroke_token("a") == "a"
    assert keystroke_token("\t") == "\t"
    assert LINE_TERMINATOR == r"\r"


def test_keystroke_token_escapes_backslash() -> None:
    assert keystroke_token("\\") == BACKSLASH_TOKEN == "\\\\"


def test_normalize_overlay_text() -> None:
    assert normalize_overlay_text("a\\nb\\nc") == "a\nb\nc"
    assert normalize_overlay_text("no escapes") == "no escapes"
