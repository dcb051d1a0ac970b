"""
keyscript package: the script execution engine.

Key parts
---------
- directives:   Directive dataclasses and the line parser
- script_model: Reads a script file into lines
- sink:         The OutputSink interface the engine drives
- engine:       Runner that executes directives in a worker thread

The desktop side (keystrokes, popup overlay, ffmpeg recorder) lives in the
top-level modules and only meets the engine through OutputSink.
"""

from .directives import ParseError, parse_line
from .engine import ScriptEngine
from .script_model import ScriptOpenError, ScriptSource
from .sink import OutputSink

__all__ = [
    "OutputSink",
    "ParseError",
    "ScriptEngine",
    "ScriptOpenError",
    "ScriptSource",
    "parse_line",
]
