"""
Cliengine lexer: turn an argv slice into parsed switches and positionals.

What this module provides
- ParsedSwitch: {invocations, values, defaulted} for one switch.
- ParsedArguments: switch name → ParsedSwitch, residual positionals and the
  usage errors found on the way.
- parse(argv, start, definitions, *, skip=None): the lexer itself.

Token grammar
- "--"                   → stop switch parsing; the rest is positional.
- "-" or "word"          → positional (switches and positionals may interleave).
- "--name=value"         → long switch with an inline value.
- "--name value"         → long switch; the next token is consumed only when
                           the argument is required.
- "--name"               → long switch; an optional argument falls back to
                           its declared default.
- "-abc"                 → short cluster, same as "-a -b -c".
- "-lvalue" / "-l value" → short switch with an argument: the rest of the
                           cluster, or (required arguments only) the next token.

Error policy
- The lexer never raises for malformed input; every problem becomes a
  UsageError appended to ParsedArguments.errors, and lexing carries on.

Defaults
- Once the walk is over, every definition with a declared default that was
  not seen gets ParsedSwitch(0, [default], defaulted=True).
"""
import difflib
import re

from .faults import *
from .utils import Unset

_LONG = re.compile(r"(?P<input>--[^=\s]+)(=(?P<value>.*))?", re.DOTALL)


class ParsedSwitch:
    """
    Result of lexing one switch.

    Fields
    - invocations: how many times the switch appeared (0 = only defaulted).
    - values: one value per invocation that carried (or defaulted) a value.
    - defaulted: True when every value came from the declared default.
    """
    __slots__ = ("invocations", "values", "defaulted")

    def __init__(self, invocations=0, values=(), defaulted=False):
        self.invocations = invocations
        self.values = list(values)
        self.defaulted = defaulted

    def __eq__(self, other):
        if not isinstance(other, ParsedSwitch):
            return NotImplemented
        return (self.invocations, self.values, self.defaulted) == (other.invocations, other.values, other.defaulted)

    def __repr__(self):
        return "parsed-switch(invocations=%r, values=%r, defaulted=%r)" % (self.invocations, self.values, self.defaulted)


class ParsedArguments:
    """
    Result of lexing one argv slice against one SwitchDefinitionSet.

    Fields
    - switches: dict name → ParsedSwitch (insertion order = first appearance,
      defaulted switches last).
    - args: residual positional arguments, in order.
    - errors: UsageError instances, in detection order.
    """
    __slots__ = ("switches", "args", "errors")

    def __init__(self, switches=(), args=(), errors=()):
        self.switches = dict(switches)
        self.args = list(args)
        self.errors = list(errors)

    def __eq__(self, other):
        if not isinstance(other, ParsedArguments):
            return NotImplemented
        return (self.switches, self.args, self.errors) == (other.switches, other.args, other.errors)

    def __repr__(self):
        return "parsed-arguments(switches=%r, args=%r, errors=%r)" % (self.switches, self.args, self.errors)

    def value(self, name, default=None, /):
        """
        Last value recorded for switch `name`, or `default`.
        """
        try:
            return self.switches[name].values[-1]
        except (KeyError, IndexError):
            return default


class _Lexer:
    """
    Internal: one lexing pass (holds the cursor and the partial result).
    """

    def __init__(self, tokens, definitions):
        self.tokens = tokens
        self.definitions = definitions
        self.result = ParsedArguments()
        self.cursor = 0

    def next(self):
        token = self.tokens[self.cursor]
        self.cursor += 1
        return token

    def fault(self, exception, message, /, **options):
        self.result.errors.append(exception(message, **options))

    def unknown(self, flag):
        suggestions = difflib.get_close_matches(flag, self.definitions.flags.keys(), 3)
        if suggestions:
            hint = "did you mean %r?" % suggestions[0]
        else:
            hint = "use the help switch to see all available switches"
        self.fault(UnknownSwitchError, "unknown switch %r" % flag, input=flag, suggestions=suggestions, hint=hint)

    def record(self, definition, flag, raw=Unset):
        """
        Store one invocation of `definition`. `raw` is Unset when no value
        was given (argument-less switch, or an optional argument left out).
        """
        entry = self.result.switches.get(definition.name)
        if entry is not None and entry.invocations and not definition.repeatable:
            return self.fault(
                RepeatedSwitchError,
                "switch %r can only be used once" % flag,
                input=flag,
                hint="keep a single %s" % flag
            )

        if entry is None:
            entry = self.result.switches[definition.name] = ParsedSwitch(defaulted=definition.argumented)

        if not definition.argumented:
            entry.invocations += 1
            entry.defaulted = False
            return

        if raw is Unset:
            entry.invocations += 1
            if definition.default is not Unset:
                entry.values.append(definition.default)
            return

        try:
            value = definition.convert(raw)
        except (ValueError, TypeError) as exception:
            if not entry.invocations:
                del self.result.switches[definition.name]
            return self.fault(
                InvalidValueError,
                "invalid value %r for switch %r: %s" % (raw, flag, exception),
                input=flag,
                value=raw,
                hint="check the accepted values with the help switch"
            )
        entry.invocations += 1
        entry.values.append(value)
        entry.defaulted = False

    def required(self, definition, flag):
        """
        Consume the next token as the value of a required argument.
        """
        if self.cursor >= len(self.tokens):
            return self.fault(
                MissingValueError,
                "switch %r requires a value" % flag,
                input=flag,
                hint="use %s <%s>" % (flag, definition.metavar)
            )
        self.record(definition, flag, self.next())

    def long(self, token):
        match = _LONG.fullmatch(token)
        if not match:
            return self.fault(
                MalformedSwitchError,
                "malformed switch %r" % token,
                input=token,
                hint="use --name or --name=value"
            )

        flag, value = match["input"], match["value"]
        if (definition := self.definitions.lookup(flag)) is None:
            return self.unknown(flag)

        if not definition.argumented:
            if value is not None:
                return self.fault(
                    UnexpectedValueError,
                    "switch %r does not take a value" % flag,
                    input=flag,
                    hint="remove everything from '=' (for example: %s)" % flag
                )
            return self.record(definition, flag)

        if value is not None:
            return self.record(definition, flag, value)
        if definition.required:
            return self.required(definition, flag)
        self.record(definition, flag)

    def short(self, token):
        cluster = token[1:]
        for index, char in enumerate(cluster):
            flag = "-" + char
            if (definition := self.definitions.lookup(flag)) is None:
                self.unknown(flag)
                continue

            if not definition.argumented:
                self.record(definition, flag)
                continue

            # An argument-bearing switch swallows the rest of the cluster.
            if rest := cluster[index + 1:]:
                self.record(definition, flag, rest)
            elif definition.required:
                self.required(definition, flag)
            else:
                self.record(definition, flag)
            return

    def run(self):
        while self.cursor < len(self.tokens):
            token = self.next()
            if token == "--":
                self.result.args.extend(self.tokens[self.cursor:])
                break
            elif token.startswith("--"):
                self.long(token)
            elif token.startswith("-") and token != "-":
                self.short(token)
            else:
                self.result.args.append(token)

        for name, definition in self.definitions.items():
            if name not in self.result.switches and definition.argumented and definition.default is not Unset:
                self.result.switches[name] = ParsedSwitch(0, [definition.default], True)

        return self.result


def parse(argv, start, definitions, /, *, skip=None):
    """
    Lex argv[start:] against a SwitchDefinitionSet.

    parameters
    - argv: sequence of str (a full argv, program name included or not).
    - start: index of the first token to look at; may be anywhere in argv,
      including len(argv) (nothing to parse).
    - definitions: SwitchDefinitionSet the tokens are matched against.
    - skip: absolute index of a token to leave out (the explicit command
      token), or None.

    returns
    - ParsedArguments; problems are reported in .errors, never raised.
    """
    if not isinstance(start, int) or start < 0:
        raise ValueError("parse() start must be a non-negative integer")
    tokens = [token for index, token in enumerate(argv) if index >= start and index != skip]
    return _Lexer(tokens, definitions).run()


__all__ = (
    "ParsedSwitch",
    "ParsedArguments",
    "parse",
)
