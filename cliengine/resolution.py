"""
Cliengine resolution: find the command, merge stored defaults, parse.

What this module provides
- Resolution: (command, index, stray) as found by Resolver.resolve().
  • index is None for an implicit (default) command.
  • stray is the first non-switch token that did not name a command.
- ResolvedInvocation: {command, definitions, parsed, errors}.
  • command is None  → no command could be determined (terminal).
  • parsed is None   → parsing failed (terminal, distinct from the above).
  • errors explains either terminal state.
- Resolver: ties a SwitchRegistry and a CommandRegistry together.
  • resolve(argv, start): command discovery.
  • parse(argv, start, resolution): lex against the command's switch set.
  • merge(live, defaults): reconcile a stored default argv with the live one.

Merge rules (both argvs non-trivial)
- neither names a command          → unresolved.
- the commands differ (or one None) → the live argv wins, defaults dropped.
- same command:
  • both are parsed against the same set; any lexer error fails the merge.
  • a live entry whose values equal [declared default] does not override an
    entry the defaults already carry (the user did not touch that switch).
  • every other live entry overrides the defaults' entry.
  • non-empty live positionals replace the defaults' positionals wholesale.

Known limitation
- A value explicitly re-typed on the live line to equal the declared default
  is indistinguishable from "not set" and loses to the stored default.
"""
import difflib

from .commands import CommandRegistry
from .faults import *
from .lexer import ParsedArguments, parse
from .switches import SwitchRegistry


class Resolution:
    """
    Outcome of command discovery on one argv.
    """
    __slots__ = ("command", "index", "stray")
    __match_args__ = ("command", "index")

    def __init__(self, command=None, index=None, stray=None):
        self.command = command
        self.index = index
        self.stray = stray

    @property
    def explicit(self):
        return self.index is not None

    def __eq__(self, other):
        if not isinstance(other, Resolution):
            return NotImplemented
        return (self.command, self.index) == (other.command, other.index)

    def __repr__(self):
        return "resolution(command=%r, index=%r)" % (getattr(self.command, "name", None), self.index)


class ResolvedInvocation:
    """
    Final product of resolution: which command runs, against which switch
    definitions, with which parsed arguments.
    """
    __slots__ = ("command", "definitions", "parsed", "errors")

    def __init__(self, command=None, definitions=None, parsed=None, errors=()):
        self.command = command
        self.definitions = definitions
        self.parsed = parsed
        self.errors = list(errors)

    @property
    def resolved(self):
        return self.command is not None

    @property
    def succeeded(self):
        return self.command is not None and self.parsed is not None

    def __eq__(self, other):
        if not isinstance(other, ResolvedInvocation):
            return NotImplemented
        return (
            self.command is other.command and
            list(self.definitions or ()) == list(other.definitions or ()) and
            self.parsed == other.parsed and
            self.errors == other.errors
        )

    def __repr__(self):
        return "resolved-invocation(command=%r, parsed=%r, errors=%r)" % (
            getattr(self.command, "name", None), self.parsed, self.errors
        )


class Resolver:
    """
    Command discovery and defaults merging over a pair of registries.
    """

    def __init__(self, switches, commands, /):
        if not isinstance(switches, SwitchRegistry):
            raise TypeError("resolver 'switches' must be a switch registry")
        if not isinstance(commands, CommandRegistry):
            raise TypeError("resolver 'commands' must be a command registry")
        self.switches = switches
        self.commands = commands

    def resolve(self, argv, start, /):
        """
        Scan argv from `start`, skipping switch-looking tokens, until a token
        names a registered command.

        returns
        - Resolution(command, i)     explicit command at index i
        - Resolution(default, None)  no command token, default registered
        - Resolution(None, None)     no command token, no default
        """
        stray = None
        for index in range(start, len(argv)):
            token = argv[index]
            if token == "--":
                break
            if token.startswith("-") and token != "-":
                continue
            if (command := self.commands.lookup(token)) is not None:
                return Resolution(command, index)
            if stray is None:
                stray = token
        return Resolution(self.commands.default, None, stray)

    def unresolved(self, resolution, /):
        """
        Build the usage error explaining why no command was found.
        """
        if resolution.stray is not None:
            suggestions = difflib.get_close_matches(resolution.stray, self.commands.names, 3)
            if suggestions:
                hint = "did you mean %r?" % suggestions[0]
            else:
                hint = "run the 'help' command to see available commands"
            return UnknownCommandError(
                "unknown command %r" % resolution.stray,
                input=resolution.stray,
                suggestions=suggestions,
                hint=hint
            )
        return MissingCommandError(
            "no command given and no default command is set",
            hint="name one of the available commands"
        )

    def parse(self, argv, start, resolution, /):
        """
        Lex argv[start:] against the resolved command's switch set, leaving
        the explicit command token out.
        """
        definitions = self.switches.build(resolution.command)
        return definitions, parse(argv, start, definitions, skip=resolution.index)

    def _single(self, argv, start):
        resolution = self.resolve(argv, start)
        if resolution.command is None:
            return ResolvedInvocation(errors=[self.unresolved(resolution)])
        definitions, parsed = self.parse(argv, start, resolution)
        if parsed.errors:
            return ResolvedInvocation(resolution.command, definitions, None, parsed.errors)
        return ResolvedInvocation(resolution.command, definitions, parsed)

    def merge(self, live, defaults=(), /):
        """
        Resolve `live` (a full argv, program name at index 0) against an
        optional default argv (no program-name slot).

        returns
        - ResolvedInvocation (see module docs for the terminal states).
        """
        live = list(live)
        defaults = list(defaults)

        if not defaults:
            return self._single(live, 1)
        if len(live) <= 1:
            return self._single(defaults, 0)

        ours = self.resolve(live, 1)
        theirs = self.resolve(defaults, 0)

        if ours.command is None and theirs.command is None:
            return ResolvedInvocation(errors=[self.unresolved(ours)])
        if ours.command is not theirs.command:
            return self._single(live, 1)

        command = ours.command
        definitions = self.switches.build(command)
        merged = parse(defaults, 0, definitions, skip=theirs.index)
        overlay = parse(live, 1, definitions, skip=ours.index)
        if errors := merged.errors + overlay.errors:
            return ResolvedInvocation(command, definitions, None, errors)

        for name, entry in overlay.switches.items():
            default = definitions[name].default
            if name in merged.switches and entry.values == [default]:
                continue
            merged.switches[name] = entry

        if overlay.args:
            merged.args = list(overlay.args)

        return ResolvedInvocation(command, definitions, ParsedArguments(merged.switches, merged.args))


__all__ = (
    "Resolution",
    "ResolvedInvocation",
    "Resolver",
)
