"""
Script directives: one typed instruction per script line.

Supported directives (line prefix):
- ``##`` / blank:      comment, ignored
- ``#interval k l``:   per-character and per-line delay in milliseconds
- ``#sleep ms``:       pause the run
- ``#popup_append t``: append a line to the popup text
- ``#popup t``:        replace the popup text
- ``#resize_popup w h``: resize the popup and pin it to the bottom-right corner
- ``#record path``:    start a screen recording into ``path``
- ``#quit``:           stop recording and end the run
- ``#pause_forever``:  stop processing but keep the process alive
- anything else:       typed as keystrokes followed by Return

Keywords are recognised by prefix, so the more specific ``#popup_append``
must be tested before ``#popup``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple, Union


# Tokens understood by the keystroke injector for characters it cannot take literally.
SPACE_TOKEN = r"\[space]"
BACKSLASH_TOKEN = "\\\\"
LINE_TERMINATOR = r"\r"


class ParseError(Exception):
    pass


@dataclass(frozen=True)
class Comment:
    pass


@dataclass(frozen=True)
class SetInterval:
    key: int
    line: int


@dataclass(frozen=True)
class Sleep:
    duration_ms: int


@dataclass(frozen=True)
class ShowOverlay:
    text: str


@dataclass(frozen=True)
class AppendOverlay:
    text: str


@dataclass(frozen=True)
class ResizeOverlay:
    width: int
    height: int


@dataclass(frozen=True)
class StartRecording:
    path: str


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class PauseForever:
    pass


@dataclass(frozen=True)
class TypeLine:
    text: str


Directive = Union[
    Comment,
    SetInterval,
    Sleep,
    ShowOverlay,
    AppendOverlay,
    ResizeOverlay,
    StartRecording,
    Quit,
    PauseForever,
    TypeLine,
]


def normalize_overlay_text(text: str) -> str:
    """Turn the literal two-character sequence ``\\n`` into a line break."""
    return text.replace("\\n", "\n")


def keystroke_token(ch: str) -> str:
    """Map one character to what the keystroke injector expects."""
    if ch == " ":
        return SPACE_TOKEN
    if ch == "\\":
        return BACKSLASH_TOKEN
    return ch


def _int_arg(keyword: str, tokens: List[str], index: int) -> int:
    try:
        raw = tokens[index]
    except IndexError:
        raise ParseError(f"{keyword}: missing argument #{index}")
    try:
        value = int(raw)
    except ValueError:
        raise ParseError(f"{keyword}: '{raw}' is not an integer")
    if value < 0:
        raise ParseError(f"{keyword}: '{raw}' must not be negative")
    return value


def _payload(line: str, keyword: str) -> str:
    # Drop the keyword and the single space separating it from the text.
    rest = line[len(keyword):]
    return rest[1:] if rest.startswith(" ") else rest


def _parse_interval(line: str, tokens: List[str]) -> Directive:
    return SetInterval(key=_int_arg("#interval", tokens, 1), line=_int_arg("#interval", tokens, 2))


def _parse_sleep(line: str, tokens: List[str]) -> Directive:
    return Sleep(duration_ms=_int_arg("#sleep", tokens, 1))


def _parse_popup_append(line: str, tokens: List[str]) -> Directive:
    return AppendOverlay(text=normalize_overlay_text(_payload(line, "#popup_append")))


def _parse_popup(line: str, tokens: List[str]) -> Directive:
    return ShowOverlay(text=normalize_overlay_text(line[len("#popup"):].strip()))


def _parse_resize(line: str, tokens: List[str]) -> Directive:
    return ResizeOverlay(
        width=_int_arg("#resize_popup", tokens, 1),
        height=_int_arg("#resize_popup", tokens, 2),
    )


def _parse_record(line: str, tokens: List[str]) -> Directive:
    path = tokens[1] if len(tokens) > 1 else ""
    if not path:
        raise ParseError("#record: missing output path")
    return StartRecording(path=path)


# Order matters: prefix matching, most specific keyword first.
_KEYWORDS: Tuple[Tuple[str, Callable[[str, List[str]], Directive]], ...] = (
    ("#interval", _parse_interval),
    ("#sleep", _parse_sleep),
    ("#popup_append", _parse_popup_append),
    ("#popup", _parse_popup),
    ("#resize_popup", _parse_resize),
    ("#record", _parse_record),
    ("#quit", lambda line, tokens: Quit()),
    ("#pause_forever", lambda line, tokens: PauseForever()),
)


def parse_line(line: str) -> Directive:
    """Classify one script line. Raises ParseError on malformed arguments."""
    if not line.strip() or line.startswith("##"):
        return Comment()

    tokens = line.split(" ")
    for keyword, parser in _KEYWORDS:
        if line.startswith(keyword):
            return parser(line, tokens)

    return TypeLine(text=line)
