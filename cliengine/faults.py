"""
Cliengine faults (usage errors, programming errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing
  issue. Codes are grouped by domain so logs and searches stay predictable.
- UsageError: base type for recoverable problems found while resolving a
  command line (unknown command, bad switch, bad value). Usage errors are
  collected, never raised past the resolution boundary; they know how to
  render themselves with rich.
- MalformedResultError: programming error raised when a handler hands back
  something that is not a valid result. Never caught by the engine.
- report(): central entry point used by the engine to surface usage errors
  on a console.

UX goals
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - routing (2110x)
      • UNKNOWN_COMMAND, MISSING_COMMAND, UNKNOWN_HELP_TOPIC
    - switches (2111x)
      • MALFORMED_SWITCH, UNKNOWN_SWITCH, REPEATED_SWITCH, MISSING_VALUE,
        UNEXPECTED_VALUE, INVALID_VALUE
    - programming errors (2190x)
      • MALFORMED_RESULT

    normalize() lets the host remap codes to friendlier labels while the
    numeric identity stays stable.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND    = 21101
    MISSING_COMMAND    = 21102
    UNKNOWN_HELP_TOPIC = 21103

    # --- switch errors ---
    MALFORMED_SWITCH   = 21111
    UNKNOWN_SWITCH     = 21112
    REPEATED_SWITCH    = 21113
    MISSING_VALUE      = 21114
    UNEXPECTED_VALUE   = 21115
    INVALID_VALUE      = 21116

    # --- programming errors ---
    MALFORMED_RESULT   = 21901

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class UsageError(Exception):
    """
    Base class for recoverable command-line faults.

    A usage error carries its message plus a read-only bag of options:
    - title, code, hint: what the renderer shows.
    - prog, colorful: injected by the engine right before rendering.
    - anything else the detector wants to keep (input, index, suggestions...).
    """
    title = "usage error"
    code = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"title": type(self).title, "code": type(self).code} | options)

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if not isinstance(other, UsageError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self):
        return hash((type(self), self.message))

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        code = self.options["code"]
        header = Text.assemble(
            "[ ",
            text(self.options.get("prog", "cli"), "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        renders = [header, text(self.message, "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)

    def replace(self, **overrides):
        """
        Return a copy of this fault with some options overridden.
        """
        return type(self)(self.message, **{**self.options, **overrides})

    __replace__ = replace


class UnknownCommandError(UsageError):
    title = "unknown command"
    code = FaultCode.UNKNOWN_COMMAND


class MissingCommandError(UsageError):
    title = "missing command"
    code = FaultCode.MISSING_COMMAND


class UnknownHelpTopicError(UsageError):
    title = "unknown help topic"
    code = FaultCode.UNKNOWN_HELP_TOPIC


class MalformedSwitchError(UsageError):
    title = "malformed switch"
    code = FaultCode.MALFORMED_SWITCH


class UnknownSwitchError(UsageError):
    title = "unknown switch"
    code = FaultCode.UNKNOWN_SWITCH


class RepeatedSwitchError(UsageError):
    title = "repeated switch"
    code = FaultCode.REPEATED_SWITCH


class MissingValueError(UsageError):
    title = "missing value"
    code = FaultCode.MISSING_VALUE


class UnexpectedValueError(UsageError):
    title = "unexpected value"
    code = FaultCode.UNEXPECTED_VALUE


class InvalidValueError(UsageError):
    title = "invalid value"
    code = FaultCode.INVALID_VALUE


class MalformedResultError(TypeError):
    """
    A switch or command handler returned something the engine cannot act on.

    This is an integration bug, not a user mistake: it is raised immediately
    and is never collected, rendered or recovered by the engine.
    """
    code = FaultCode.MALFORMED_RESULT

    def __init__(self, handler, result, /):
        self.handler = handler
        self.result = result
        super().__init__(
            "%s returned %r, which is not a valid result" % (getattr(handler, "__qualname__", repr(handler)), result)
        )


def report(faults, console, /, **options):
    """
    Render usage errors on a rich console.

    contract
    - faults: iterable of UsageError.
    - options (e.g. prog, colorful) are merged into each fault before printing.
    - returns the number of faults rendered.
    """
    count = 0
    for fault in faults:
        if not isinstance(fault, UsageError):
            raise TypeError("report() can only render usage errors")
        console.print(fault.replace(**options), soft_wrap=True)
        count += 1
    return count


__all__ = (
    "FaultCode",
    "UsageError",
    "UnknownCommandError",
    "MissingCommandError",
    "UnknownHelpTopicError",
    "MalformedSwitchError",
    "UnknownSwitchError",
    "RepeatedSwitchError",
    "MissingValueError",
    "UnexpectedValueError",
    "InvalidValueError",
    "MalformedResultError",
    "report",
)
