"""
Cliengine switch execution: handler results, invocation context, sequencer.

Overview
- Results (closed set; anything else is a programming error)
  • Continue(): keep going with the next switch / the command.
  • Complete(code): stop now and exit with `code` (help, version...).

- Context
  • One per CliEngine.main() call. Carries the engine, the output writer,
    the selected command, the parsed arguments, the caller's opaque
    `additional` value and a mutable `options` namespace switch handlers
    use to hand state to the command (e.g. options.verbosity).

- run(definitions, parsed, context)
  • Walks switch definitions in registration order and invokes the handler
    of every switch present in the parse. Stops at the first Complete.

Example
    >>> outcome = run(definitions, parsed, context)
    >>> match outcome:
    ...     case Complete(code=code): return code
    ...     case Continue(): pass
"""
import functools
from types import SimpleNamespace
from typing import final

from .faults import MalformedResultError


class Outcome:
    """
    Base of the handler result variants. Not instantiable on its own.
    """
    __slots__ = ()
    __match_args__ = ()

    def __new__(cls, *args, **kwargs):
        if cls is Outcome:
            raise TypeError("type 'Outcome' cannot be instantiated directly, use Continue() or Complete(code)")
        return super().__new__(cls)


@final
class Continue(Outcome):
    """
    Keep processing. Singleton; carries no exit code.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    @property
    def code(self):
        return None

    def __repr__(self):
        return "Continue()"


@final
class Complete(Outcome):
    """
    Stop processing and exit with `code`.
    """
    __slots__ = ("_code",)
    __match_args__ = ("code",)

    def __init__(self, code=0, /):
        if isinstance(code, bool) or not isinstance(code, int):
            raise TypeError("Complete() code must be an integer")
        if code < 0:
            raise ValueError("Complete() code cannot be negative")
        self._code = code

    @property
    def code(self):
        return self._code

    def __eq__(self, other):
        if not isinstance(other, Complete):
            return NotImplemented
        return self._code == other._code

    def __hash__(self):
        return hash((Complete, self._code))

    def __repr__(self):
        return "Complete(%d)" % self._code


class Context:
    """
    Per-invocation state handed to every switch handler and to the command.

    Fields
    - engine: the running CliEngine (read registries, app metadata).
    - output: the engine's OutputWriter.
    - command: the resolved Command (None while no command is known).
    - parsed: the ParsedArguments being executed (None before parsing).
    - additional: opaque value passed to CliEngine.main(), never touched.
    - options: SimpleNamespace for handler-to-command state.
    """

    def __init__(self, engine, /, additional=None, *, command=None, parsed=None, **options):
        self.engine = engine
        self.output = getattr(engine, "output", None)
        self.additional = additional
        self.command = command
        self.parsed = parsed
        self.options = SimpleNamespace(**options)

    def __repr__(self):
        return "context(command=%r, options=%r)" % (getattr(self.command, "name", None), self.options)


def run(definitions, parsed, context, /):
    """
    Execute switch handlers in registration order.

    contract
    - definitions: SwitchDefinitionSet (iteration order is execution order).
    - parsed: ParsedArguments; only switches present in parsed.switches run.
    - each handler is called as handler(invocations, values, defaulted, context).
    - a Complete result stops the walk immediately and is returned; switches
      registered later never run.
    - any result that is neither Continue nor Complete raises
      MalformedResultError (fatal, not recoverable).
    - exhausting the walk returns Continue().
    """
    for name, definition in definitions.items():
        try:
            entry = parsed.switches[name]
        except KeyError:
            continue

        result = definition(entry.invocations, list(entry.values), entry.defaulted, context)
        match result:
            case Complete():
                return result
            case Continue():
                continue
            case _:
                raise MalformedResultError(definition, result)

    return Continue()


__all__ = (
    "Outcome",
    "Continue",
    "Complete",
    "Context",
    "run",
)
