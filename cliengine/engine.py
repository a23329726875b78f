"""
Cliengine engine: application metadata, registries and the main loop.

What this module provides
- CliEngine: the entry point applications build at startup.
  • metadata: name, version, license, homepage, copyright (help/version).
  • registries: engine switches (SwitchRegistry) and commands
    (CommandRegistry), read-only once main() runs.
  • main(argv, context=None, /, defaults=()): resolve, parse, run switches,
    dispatch, return an exit code.

Main loop (one call)
    START
      → UNRESOLVED         usage error printed on stderr, exit 1 (unless a
                           commandlike engine switch completes, e.g. -h)
      → COMMAND_RESOLVED
          → PARSE_FAILED   usage errors printed on stderr, exit 1
          → SWITCHES_PARSED
              → engine switches run   (Complete(code) → exit code)
              → command switches run  (Complete(code) → exit code)
              → command dispatched    → its exit code (None → 0)

Exit codes
- 0 on success, 1 on usage/parse failure, otherwise the command's own code.
- MalformedResultError from any handler propagates: it is a programming
  error, not a user mistake.

Quick start
    from cliengine import CliEngine, command, standard

    @command("build", descr="build the project")
    def build(context, args):
        return 0

    engine = CliEngine(name="tool", version="1.2.0")
    engine.add_engine_switch(standard.short_help_switch())
    engine.add_command(standard.help_command())
    engine.set_default_command(build)
    raise SystemExit(engine.main(sys.argv))
"""
import os.path
import sys
from collections.abc import Mapping

from .commands import CommandRegistry
from .execution import Complete, Context, run
from .faults import report
from .lexer import parse
from .output import OutputWriter
from .resolution import Resolver
from .switches import SwitchDefinitionSet, SwitchRegistry
from .utils import *


def _sanitize_metadata(cls, metadata):
    """
    Normalize the application metadata in place.

    - name: non-empty string; Unset → basename of sys.argv[0].
    - version, license, homepage, copyright: non-empty string or Unset → None.
    - colorful: bool; Unset → True (or the given output writer's setting).
    - options: mapping of initial Context.options values.
    """
    if metadata["name"] is Unset:
        metadata["name"] = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cli"

    for field in ("name", "version", "license", "homepage", "copyright"):
        if not isinstance(value := metadata[field], str | Unset):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        metadata[field] = coalesce(value)

    if metadata["output"] is not Unset and not isinstance(metadata["output"], OutputWriter):
        raise TypeError(f"{cls.__typename__} 'output' must be an output writer")

    if metadata["colorful"] is Unset:
        metadata["colorful"] = metadata["output"].colorful if metadata["output"] is not Unset else True
    metadata["colorful"] = bool(metadata["colorful"])

    if metadata["output"] is Unset:
        metadata["output"] = OutputWriter(colorful=metadata["colorful"])

    if not isinstance(options := coalesce(metadata["options"], {}), Mapping):
        raise TypeError(f"{cls.__typename__} 'options' must be a mapping")
    metadata["options"] = dict(options)


def _sanitize_argv(argv):
    if isinstance(argv, str):
        raise TypeError("main() 'argv' must be a sequence of strings, not a string")
    try:
        argv = list(argv)
    except TypeError:
        raise TypeError("main() 'argv' must be a sequence of strings") from None
    if not all(isinstance(token, str) for token in argv):
        raise TypeError("main() 'argv' items must be strings")
    return argv


class CliEngine(metaclass=SpecType):
    """
    A command-line application: metadata, registries and the main loop.

    Parameters (all optional, keyword-only after name)
    - name: program name shown in help and diagnostics.
    - version, license, homepage, copyright: help/version metadata.
    - colorful: style output and diagnostics.
    - output: OutputWriter to write through (tests hand in StringIO consoles).
    - options: initial values of Context.options for every main() call.
    """

    __introspectable__ = (
        "name",
        "version",
        "license",
        "homepage",
        "copyright",
        "colorful",
        "options",
    )

    __displayable__ = (
        "name",
        "version",
        "colorful",
    )

    def __init__(
            self,
            name=Unset,
            /,
            *,
            version=Unset,
            license=Unset,
            homepage=Unset,
            copyright=Unset,
            colorful=Unset,
            output=Unset,
            options=Unset
    ):
        metadata = {
            "name": name,
            "version": version,
            "license": license,
            "homepage": homepage,
            "copyright": copyright,
            "colorful": colorful,
            "output": output,
            "options": options,
        }
        _sanitize_metadata(type(self), metadata)

        self.output = metadata.pop("output")
        for field, value in metadata.items():
            setattr(self, "_" + field, value)

        self.switches = SwitchRegistry()
        self.commands = CommandRegistry()
        self.resolver = Resolver(self.switches, self.commands)

    # --- setup ---

    def add_engine_switch(self, definition, /):
        return self.switches.register(definition)

    def add_command(self, command, /):
        return self.commands.register(command)

    def set_default_command(self, command, /):
        return self.commands.set_default(command)

    def get_command(self, name, /):
        return self.commands.lookup(name)

    # --- diagnostics ---

    def report(self, faults, /):
        """
        Print usage errors on the error stream; returns how many were printed.
        """
        return report(faults, self.output.stderr.console, prog=self._name, colorful=self._colorful)

    # --- main loop ---

    def _seed(self, state, definitions):
        """
        Seed context options declared by switch definitions. Values already
        present (engine options, earlier definitions) are kept.
        """
        for definition in definitions.values():
            for key, value in definition.options.items():
                vars(state.options).setdefault(key, value)

    def _fallback(self, argv, defaults, context):
        """
        No command resolved: let commandlike engine switches (help, version)
        act as the command. Returns an exit code, or None to report.
        """
        if len(argv) > 1 or not defaults:
            tokens, start = argv, 1
        else:
            tokens, start = list(defaults), 0

        definitions = self.switches.definitions
        parsed = parse(tokens, start, definitions)
        if parsed.errors:
            return None
        if not any(definitions[name].commandlike and entry.invocations for name, entry in parsed.switches.items()):
            return None

        context.parsed = parsed
        match run(definitions, parsed, context):
            case Complete(code):
                return code
        return None

    def main(self, argv, context=None, /, defaults=()):
        """
        Run the application once.

        parameters
        - argv: full argument vector, program name at index 0.
        - context: opaque value handed to every handler as Context.additional.
        - defaults: stored default arguments (no program-name slot), merged
          under the live ones.

        returns
        - int exit code.
        """
        argv = _sanitize_argv(argv) or [self._name]
        defaults = _sanitize_argv(defaults)

        invocation = self.resolver.merge(argv, defaults)
        state = Context(self, context, **self._options)
        self._seed(state, self.switches.definitions)

        if invocation.command is None:
            if (code := self._fallback(argv, defaults, state)) is not None:
                return code
            self.report(invocation.errors)
            return 1

        if invocation.parsed is None:
            self.report(invocation.errors)
            return 1

        command, parsed = invocation.command, invocation.parsed
        state.command = command
        state.parsed = parsed

        engine = self.switches.definitions
        own = SwitchDefinitionSet(
            definition for name, definition in invocation.definitions.items() if name not in engine
        )
        self._seed(state, own)
        for definitions in (engine, own):
            match run(definitions, parsed, state):
                case Complete(code):
                    return code

        return command.process_command(state, parsed.args)


__all__ = (
    "CliEngine",
)
