import pytest

from keyscript.script_model import ScriptOpenError, ScriptSource


def test_reads_utf8_lines(tmp_path) -> None:
    script = tmp_path / "s.txt"
    script.write_text("héllo\n#quit\n", encoding="utf-8")

    assert ScriptSource(script).read_lines() == ["héllo", "#quit"]


def test_last_line_without_newline_is_kept() -> None:
    assert ScriptSource.from_text("a\nb").read_lines() == ["a", "b"]


def test_blank_lines_are_kept() -> None:
    assert ScriptSource.from_text("a\n\n\nb\n").read_lines() == ["a", "", "", "b"]


def test_empty_script_has_no_lines() -> None:
    assert ScriptSource.from_text("").read_lines() == []


def test_form_feed_stays_inside_the_line() -> None:
    assert ScriptSource.from_text("a\x0cb\n").read_lines() == ["a\x0cb"]


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(ScriptOpenError):
        ScriptSource(tmp_path / "nope.txt").read_lines()


def test_invalid_utf8_raises(tmp_path) -> None:
    script = tmp_path / "bad.txt"
    script.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(ScriptOpenError):
        ScriptSource(script).read_lines()


def test_name() -> None:
    assert ScriptSource.from_text("x", name="inline").name == "inline"
    assert ScriptSource("demo.txt").name == "demo.txt"
