"""
Cliengine standard switches and commands.

Factories (each call builds a fresh definition, register it yourself)
- short_help_switch(): -h / -?; once → short help, twice or more → long help.
- long_help_switch(): --help; long help.
- version_switch(): -v / --version; prints the application version.
- short_verbose_switch(low, high): -V, repeatable; verbosity = min(count, high).
- long_verbose_switch(low, high): --verbose[=LEVEL]; LEVEL in [low, high].
- help_command(): `help [<command>]`.

The help and version switches are commandlike: they work even when the
command line names no (valid) command, e.g. `prog -h`.

Both verbose switches store their level in context.options.verbosity and
seed it with `low` when they are not given.

Example
    engine = CliEngine(name="tool", version="1.0.0")
    engine.add_engine_switch(short_help_switch())
    engine.add_engine_switch(long_help_switch())
    engine.add_command(help_command())
"""
from .commands import command
from .execution import Complete, Continue
from .faults import UnknownHelpTopicError
from .rendering import show_command_help, show_long_help, show_short_help
from .switches import inrange, switch


def short_help_switch():
    @switch(
        "short-help", "-h", "-?",
        repeatable=True,
        commandlike=True,
        descr="display summary of supported switches"
    )
    def short_help(invocations, values, defaulted, context):
        if invocations == 1:
            show_short_help(context.engine)
        else:
            show_long_help(context.engine)
        return Complete(0)

    return short_help


def long_help_switch():
    @switch("long-help", "--help", commandlike=True, descr="display full help")
    def long_help(invocations, values, defaulted, context):
        show_long_help(context.engine)
        return Complete(0)

    return long_help


def version_switch():
    @switch("version", "-v", "--version", commandlike=True, descr="display app version number")
    def version(invocations, values, defaulted, context):
        context.output.stdout.output_line("highlight", context.engine.version or "unknown")
        return Complete(0)

    return version


def short_verbose_switch(low, high, /):
    """
    -V, repeatable: each occurrence raises the verbosity by one, capped at
    `high`. The verbosity starts at `low` when -V is not given.
    """
    inrange(low, high)

    @switch(
        "short-verbose", "-V",
        repeatable=True,
        options={"verbosity": low},
        descr="increase amount of information shown"
    )
    def short_verbose(invocations, values, defaulted, context):
        context.options.verbosity = min(invocations, high)
        return Continue()

    return short_verbose


def long_verbose_switch(low, high, /):
    """
    --verbose[=LEVEL]: set the verbosity explicitly.

    The verbosity starts at `low`; the defaulted case leaves whatever level
    another switch already set.
    """
    @switch(
        "long-verbose", "--verbose",
        metavar="LEVEL",
        type=int,
        validator=inrange(low, high),
        default=low,
        options={"verbosity": low},
        descr="increase amount of information shown",
        details="LEVEL must be between %d and %d" % (low, high)
    )
    def long_verbose(invocations, values, defaulted, context):
        if not defaulted:
            context.options.verbosity = values[-1]
        return Continue()

    return long_verbose


def help_command():
    @command(
        "help",
        descr="get help about this tool or about a specific command",
        details=(
            "Use this command to get a list of all of the commands that this tool provides.\n"
            "\n"
            "If you use the optional <command> parameter, you'll see detailed help about "
            "just that specific command."
        ),
        args={"[<command>]": "get help about a specific command"}
    )
    def help(context, args):
        engine = context.engine
        if not args:
            show_long_help(engine)
            return 0

        if (topic := engine.get_command(args[0])) is None:
            engine.report([UnknownHelpTopicError(
                "cannot provide help for unknown command %r" % args[0],
                input=args[0],
                hint="run '%s help' to list the available commands" % engine.name
            )])
            return 1

        show_command_help(engine, topic)
        return 0

    return help


__all__ = (
    "short_help_switch",
    "long_help_switch",
    "version_switch",
    "short_verbose_switch",
    "long_verbose_switch",
    "help_command",
)
