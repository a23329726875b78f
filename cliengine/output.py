"""
Cliengine output: styled, indent-aware writers over rich consoles.

Overview
- OutputWriter: the engine's output sink. Holds two Streams:
  • stdout → Console()
  • stderr → Console(stderr=True)
  plus the palette shared by both.
- Stream: line-oriented writer with a column-based indent.
  • output(style, *fragments): write text, no line break.
  • output_line(style, *fragments): write text, then end the line.
  • output_blank_line(): end the line once more (an empty line when the
    cursor is already at column 0).
  • set_indent(n) / add_indent(n): move the indent column.

Indentation
- Text written while the cursor sits left of the indent column is padded up
  to it. Moving the indent mid-line (add_indent) therefore aligns the next
  fragment on that column, which is how help output builds its tables.

Palette
- Style names: arg, command, comment, error, example, highlight, normal,
  switch, url.
- Define a mapping named __styles__ in __main__ to override any entry.
- When colorful is False, every style is stripped.
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .utils import *

STYLES = (
    "arg",
    "command",
    "comment",
    "error",
    "example",
    "highlight",
    "normal",
    "switch",
    "url",
)


def _palette(overrides):
    styles = defaultdict(str, {
        "arg": "bold #36C5F0",  # sky-blue parameters
        "command": "bold #22C55E",  # green commands
        "comment": "#36C5F0",
        "error": "bold #EF4444",
        "example": "bold #FFD600",  # amber samples and defaults
        "highlight": "bold #22C55E",
        "normal": "",
        "switch": "bold #FFD600",
        "url": "bold #36C5F0 underline",
    } | getattr(__import__("__main__"), "__styles__", {}))
    return styles | dict(overrides)


class Stream:
    """
    One output stream (stdout or stderr) with an indent column.
    """

    def __init__(self, console, styles, /, *, colorful=True):
        if not isinstance(console, Console):
            raise TypeError("stream 'console' must be a rich console")
        self._console = console
        self._styles = styles
        self._colorful = bool(colorful)
        self._indent = 0
        self._column = 0

    @property
    def console(self):
        return self._console

    @property
    def indent(self):
        return self._indent

    @property
    def column(self):
        return self._column

    def _style(self, style):
        if style is None:
            return ""
        if style not in STYLES and style not in self._styles:
            raise ValueError(f"unknown output style {style!r}")
        return self._styles[style] if self._colorful else ""

    def _write(self, fragment, style=""):
        self._console.print(Text(fragment, style), end="", soft_wrap=True, highlight=False)
        self._column += len(fragment)

    def _newline(self):
        self._console.print(Text(), soft_wrap=True)
        self._column = 0

    def output(self, style, /, *fragments):
        """
        Write `fragments` (joined) in `style`; embedded newlines end lines
        and every new line is indented again.
        """
        style = self._style(style)
        for index, line in enumerate("".join(map(str, fragments)).split("\n")):
            if index:
                self._newline()
            if not line:
                continue
            if self._column < self._indent:
                self._write(" " * (self._indent - self._column))
            self._write(line, style)
        return self

    def output_line(self, style, /, *fragments):
        self.output(style, *fragments)
        self._newline()
        return self

    def output_blank_line(self):
        self._newline()
        return self

    def set_indent(self, indent, /):
        if isinstance(indent, bool) or not isinstance(indent, int):
            raise TypeError("set_indent() argument must be an integer")
        if indent < 0:
            raise ValueError("set_indent() argument cannot be negative")
        self._indent = indent
        return self

    def add_indent(self, delta, /):
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise TypeError("add_indent() argument must be an integer")
        return self.set_indent(max(0, self._indent + delta))


class OutputWriter:
    """
    The engine's output sink: stdout and stderr streams sharing a palette.

    Parameters
    - stdout / stderr: rich Consoles (Unset → Console() / Console(stderr=True)).
      Tests pass Console(file=io.StringIO()) to capture output.
    - colorful: keep styles (True) or strip them (False).
    - styles: per-writer palette overrides (applied on top of __styles__).
    """

    def __init__(self, stdout=Unset, stderr=Unset, /, *, colorful=True, styles=Unset):
        stdout = stdout if stdout is not Unset else Console()
        stderr = stderr if stderr is not Unset else Console(stderr=True)
        self._colorful = bool(colorful)
        self._styles = _palette(coalesce(styles, {}))
        self.stdout = Stream(stdout, self._styles, colorful=self._colorful)
        self.stderr = Stream(stderr, self._styles, colorful=self._colorful)

    @property
    def colorful(self):
        return self._colorful

    @property
    def styles(self):
        return dict(self._styles)


__all__ = (
    "OutputWriter",
    "Stream",
)
