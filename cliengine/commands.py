"""
Cliengine command layer: named sub-commands and their registry.

What this module provides
- Command: a named sub-command with:
  • short (descr) and long (details) help text,
  • ordered positional-argument descriptors (name → description),
  • its own SwitchDefinitionSet (possibly empty),
  • a handler callback(context, args) -> exit code.
- command(...): build a Command and bind its handler (decorator).
- CommandRegistry: name → Command, plus an optional default command used
  when the command line names none.

Quick start
    from cliengine import command, switch, Continue

    @switch("force", "-f", "--force", descr="overwrite existing files")
    def on_force(invocations, values, defaulted, context):
        context.options.force = True
        return Continue()

    @command("build", descr="build the project", args={"target": "what to build"}, switches=[on_force])
    def build(context, args):
        ...
        return 0

Result contract
- The handler returns an int (returned verbatim by the engine) or None
  (success, 0). Anything else is a programming error and raises
  MalformedResultError.
"""
import re
from collections.abc import Mapping

from .faults import MalformedResultError
from .switches import SwitchDefinition, SwitchDefinitionSet
from .utils import *

_NAME = re.compile(r"[^\s-]\S*")


def _sanitize_strings(cls, metadata):
    """
    Normalize name/descr/details.

    Errors
    - TypeError: when a value is not str (or Unset for descr/details).
    - ValueError: empty strings, or a name that could be taken for a switch.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not _NAME.fullmatch(name):
        raise ValueError(f"{cls.__typename__} 'name' must be a single word not starting with '-'")

    for field in ("descr", "details"):
        if not isinstance(value := metadata[field], str | Unset):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        metadata[field] = coalesce(value)


def _sanitize_args(cls, metadata):
    """
    Normalize positional-argument descriptors into an ordered dict.

    Accepts a mapping (name → description) or an iterable of names or
    (name, description) pairs. Descriptions may be None.
    """
    args = metadata["args"]
    if isinstance(args, Mapping):
        args = args.items()
    elif isinstance(args, str):
        raise TypeError(f"{cls.__typename__} 'args' must be a mapping or an iterable, not a string")

    result = {}
    for item in args:
        if isinstance(item, str):
            name, descr = item, None
        else:
            try:
                name, descr = item
            except (TypeError, ValueError):
                raise TypeError(f"{cls.__typename__} 'args' items must be names or (name, description) pairs") from None
        if not isinstance(name, str) or not isinstance(descr, str | None):
            raise TypeError(f"{cls.__typename__} 'args' names and descriptions must be strings")
        if not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'args' names cannot be empty")
        if name in result:
            raise ValueError(f"{cls.__typename__} 'args' cannot contain duplicate name {name!r}")
        result[name] = descr
    metadata["args"] = result


def _sanitize_switches(cls, metadata):
    switches = metadata["switches"]
    if isinstance(switches, SwitchDefinitionSet):
        return
    if isinstance(switches, SwitchDefinition):
        switches = [switches]
    try:
        metadata["switches"] = SwitchDefinitionSet(switches)
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'switches' must be switch definitions") from None


class Command(metaclass=SpecType):
    """
    A named sub-command.

    The handler is bound by @command (see below). Calling the command runs
    the handler and normalizes its result to an exit code; an unbound
    command succeeds without doing anything.
    """

    __introspectable__ = (
        "name",
        "descr",
        "details",
        "args",
        "switches",
        "callback",
    )

    __displayable__ = (
        "name",
        "descr",
        "args",
        "switches",
    )

    def __init__(self, name, /, *, descr=Unset, details=Unset, args=(), switches=()):
        metadata = {
            "name": name,
            "descr": descr,
            "details": details,
            "args": args,
            "switches": switches,
        }
        _sanitize_strings(type(self), metadata)
        _sanitize_args(type(self), metadata)
        _sanitize_switches(type(self), metadata)

        self._callback = None
        for field, value in metadata.items():
            setattr(self, "_" + field, value)

    def process_command(self, context, args, /):
        """
        Run the handler with the invocation context and the positional args.

        returns
        - int exit code (None from the handler means 0).

        raises
        - MalformedResultError when the handler returns anything else.
        """
        if self._callback is None:
            return 0
        result = self._callback(context, list(args))
        match result:
            case None:
                return 0
            case bool():
                raise MalformedResultError(self._callback, result)
            case int():
                return result
            case _:
                raise MalformedResultError(self._callback, result)

    __call__ = process_command


def command(*args, **kwargs):
    """
    Decorator/factory for defining a sub-command and its handler.

    Usage
        @command("test", descr="run the test-suite", args={"pattern": "tests to run"})
        def test(context, args):
            return 0

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Returns the configured Command with the function bound.
    """
    instance = Command(*args, **kwargs)

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        if instance._callback is not None:
            raise TypeError("@command() must be applied only once")
        instance._callback = callback
        return instance

    return wrapper


class CommandRegistry:
    """
    Commands by name, plus the optional default command.

    Names are unique: the last command registered under a name replaces the
    earlier one, and takes over as default when the replaced command was
    the default. Iteration yields commands sorted by name, which is the
    order help output uses.
    """

    def __init__(self, commands=(), /):
        self._commands = {}
        self._default = None
        for instance in commands:
            self.register(instance)

    def register(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("command registry can only register commands")
        if (existing := self._commands.get(command.name)) is not None and existing is self._default:
            self._default = command
        self._commands[command.name] = command
        return command

    def set_default(self, command, /):
        """
        Register `command` if needed and make it the fallback.
        """
        self._default = self.register(command)
        return command

    def lookup(self, name, /):
        return self._commands.get(name)

    def has_default(self):
        return self._default is not None

    @property
    def default(self):
        """
        The default command, or None.
        """
        return self._default

    @property
    def names(self):
        return sorted(self._commands)

    def __contains__(self, name, /):
        return name in self._commands

    def __iter__(self):
        return iter(self._commands[name] for name in sorted(self._commands))

    def __len__(self):
        return len(self._commands)


__all__ = (
    "Command",
    "CommandRegistry",
    "command",
)
