"""
Cliengine help rendering (man-page-like, written through OutputWriter).

Entry points
- show_short_help(engine): one-line switch summary.
- show_long_help(engine): header, SYNOPSIS, OPTIONS and COMMANDS.
- show_command_help(engine, command): NAME, SYNOPSIS, OPTIONS, DESCRIPTION
  and IMPLEMENTATION for one command.

Switch ordering
- Summaries and OPTIONS follow SwitchDefinitionSet.display_order():
  short flags without arguments, long flags without arguments, then short
  and long flags with arguments. Every switch's details are shown once, even
  when it has several flags.

Styles used: arg, command, comment, example, highlight, switch, url.
"""
import inspect

from .utils import *

NO_DESCRIPTION = "no description set"


def _metavar(definition, flag):
    """
    Spell the argument part for one flag, e.g. "=LEVEL", "[=LEVEL]", " LEVEL".
    """
    if flag.startswith("--"):
        return ("=%s" if definition.required else "[=%s]") % definition.metavar
    return (" %s" if definition.required else " [%s]") % definition.metavar


def show_switch_summary(stream, definitions, /):
    """
    Write " [ -a -b ] [ --long ] [ -x ARG ] [ --long=ARG ]" for a set.
    """
    order = definitions.display_order()

    for group in ("shorts", "longs"):
        if order[group]:
            stream.output(None, " [ ")
            stream.output("switch", " ".join(order[group]))
            stream.output(None, " ]")

    for group in ("short_args", "long_args"):
        for flag, definition in order[group].items():
            stream.output(None, " [ ")
            stream.output("switch", flag)
            stream.output("arg", _metavar(definition, flag))
            stream.output(None, " ]")


def show_switch_details(stream, definition, /):
    """
    Write the OPTIONS entry for one switch: its flags, then (indented) the
    description, the details and the default value.
    """
    for index, flag in enumerate(definition.flags):
        if index:
            stream.output(None, " | ")
        stream.output("switch", flag)
        if definition.argumented:
            stream.output("arg", _metavar(definition, flag))
    stream.output_line(None)

    stream.add_indent(4)
    stream.output_line(None, definition.descr or NO_DESCRIPTION)
    if definition.details:
        stream.output_blank_line()
        stream.output_line(None, definition.details)

    if definition.argumented and definition.default is not Unset:
        stream.output_blank_line()
        stream.output(None, "The default value for ")
        stream.output("arg", definition.metavar)
        stream.output(None, " is: ")
        stream.output_line("example", definition.default)

    stream.add_indent(-4)
    stream.output_blank_line()


def _show_all_details(stream, definitions):
    seen = set()
    for definition in definitions.display_order()["all"].values():
        if definition.name in seen:
            continue
        seen.add(definition.name)
        show_switch_details(stream, definition)


def show_short_help(engine, /):
    stream = engine.output.stdout
    stream.set_indent(0)
    stream.output("highlight", engine.name)
    stream.output(None, " -")
    show_switch_summary(stream, engine.switches.definitions)
    stream.output_line(None, " [ command ] [ command-options ]")


def show_long_help(engine, /):
    """
    Write the full application help.

    Layout
    - "<name> <version> - <homepage>", then copyright and license lines
      (each only when set).
    - SYNOPSIS: the switch summary.
    - OPTIONS: details of every engine switch.
    - COMMANDS: sorted command names aligned with "# <descr>", or a notice
      when the application defines none.
    """
    stream = engine.output.stdout
    definitions = engine.switches.definitions

    stream.set_indent(0)
    stream.output("highlight", " ".join(filter(None, (engine.name, engine.version))))
    if engine.homepage:
        stream.output(None, " -")
        stream.output("url", " ", engine.homepage)
    stream.output_line(None)
    for line in (engine.copyright, engine.license):
        if line:
            stream.output_line(None, line)
    stream.output_blank_line()

    stream.output_line(None, "SYNOPSIS")
    stream.set_indent(4)
    stream.output("command", engine.name)
    show_switch_summary(stream, definitions)
    stream.output_line(None, " [ command ] [ command-options ]")
    stream.output_blank_line()

    if definitions:
        stream.set_indent(0)
        stream.output_line(None, "OPTIONS")
        stream.add_indent(4)
        stream.output_line(None, "Use the following switches in front of any <command> to have the following effects.")
        stream.output_blank_line()
        _show_all_details(stream, definitions)

    show_commands_list(engine)


def show_commands_list(engine, /):
    stream = engine.output.stdout
    stream.set_indent(0)
    stream.output_line(None, "COMMANDS")
    stream.add_indent(4)

    commands = list(engine.commands)
    if not commands:
        stream.output(None, "At this moment in time, ")
        stream.output("command", engine.name)
        stream.output_line(None, " hasn't defined any commands for you to run, sorry!")
        stream.set_indent(0)
        return

    # Descriptions line up one column after the longest name.
    width = max(len(command.name) for command in commands)
    for command in commands:
        stream.output("command", command.name)
        stream.add_indent(width + 1)
        stream.output("comment", "# ")
        stream.add_indent(2)
        stream.output_line(None, command.descr or NO_DESCRIPTION)
        stream.add_indent(-width - 3)

    stream.output_blank_line()
    stream.output(None, "See ")
    stream.output("command", engine.name, " help <command>")
    stream.output_line(None, " for detailed help on <command>")
    stream.set_indent(0)


def _implementation(command):
    callback = command.callback
    if callback is None:
        return "%s.%s" % (type(command).__module__, type(command).__qualname__), inspect.getsourcefile(type(command))
    name = "%s.%s" % (getattr(callback, "__module__", "?"), getattr(callback, "__qualname__", repr(callback)))
    try:
        source = inspect.getsourcefile(callback)
    except TypeError:
        source = None
    return name, source or "<unknown>"


def show_command_help(engine, command, /):
    """
    Write the man-page for one command.
    """
    stream = engine.output.stdout
    definitions = command.switches
    args = command.args

    # NAME
    stream.set_indent(0)
    stream.output_line(None, "NAME")
    stream.set_indent(4)
    stream.output("command", engine.name, " ", command.name)
    stream.output_line(None, " - ", command.descr or NO_DESCRIPTION)
    stream.add_indent(-4)
    stream.output_blank_line()

    # SYNOPSIS
    stream.output_line(None, "SYNOPSIS")
    stream.set_indent(4)
    stream.output("command", engine.name, " ", command.name)
    show_switch_summary(stream, definitions)
    for name in args:
        stream.output("arg", " ", name)
    stream.output_line(None)
    stream.output_blank_line()

    # OPTIONS
    if definitions or args:
        stream.set_indent(0)
        stream.output_line(None, "OPTIONS")
        stream.add_indent(4)
        _show_all_details(stream, definitions)
        for name, descr in args.items():
            stream.output_line("arg", name)
            stream.add_indent(4)
            stream.output_line(None, descr or NO_DESCRIPTION)
            stream.add_indent(-4)
            stream.output_blank_line()

    # DESCRIPTION
    stream.set_indent(0)
    stream.output_line(None, "DESCRIPTION")
    stream.set_indent(4)
    stream.output_line(None, command.details or command.descr or NO_DESCRIPTION)
    stream.output_blank_line()

    # IMPLEMENTATION
    name, source = _implementation(command)
    stream.set_indent(0)
    stream.output_line(None, "IMPLEMENTATION")
    stream.add_indent(4)
    stream.output_line(None, "This command is implemented in the Python callable:")
    stream.output_blank_line()
    stream.output("command", "* ")
    stream.add_indent(2)
    stream.output_line(None, name)
    stream.add_indent(-2)
    stream.output_blank_line()
    stream.output_line(None, "which is defined in the file:")
    stream.output_blank_line()
    stream.output("command", "* ")
    stream.add_indent(2)
    stream.output_line(None, source)
    stream.set_indent(0)


__all__ = (
    "show_short_help",
    "show_long_help",
    "show_command_help",
    "show_commands_list",
    "show_switch_summary",
    "show_switch_details",
)
