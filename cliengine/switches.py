r"""
Cliengine switch definitions, definition sets and the engine switch registry.

Overview
- SwitchDefinition: a named switch triggered by one or more short (-x) or
  long (--xyz) flags, optionally carrying one argument.
- @switch(...): build a SwitchDefinition and bind a handler to it. The
  handler is called as handler(invocations, values, defaulted, context) and
  must return Continue() or Complete(code).
- SwitchDefinitionSet: immutable, insertion-ordered name → definition
  mapping; `left | right` composes two sets with left-hand precedence.
- SwitchRegistry: engine-level switches; build(command) composes the set a
  single resolution attempt works with.
- inrange(low, high): integer validator for switch arguments.

Metadata (sanitized on construction)
- name: non-empty identifier, unique within a set.
- flags: "-x" (any single non-space char except '-' and '=') or "--long-name"
  (r"--[^\W\d_](-?[^\W_]+)*"); duplicates rejected.
- metavar: Unset | str. A switch carries an argument iff metavar is given.
- required: the argument must be supplied (otherwise it is optional).
- default: declared default for the argument (Unset = none).
- type: converter applied to raw string values.
- validator: Unset | callable raising ValueError/TypeError on bad values.
- repeatable: the switch may appear more than once.
- commandlike: the switch acts as a command (help, version); the engine
  honours it even when no command could be resolved.
- options: mapping of initial context.options values the engine seeds on
  every run, whether or not the switch is given.
- descr / details: short and long help text.

Quick example:
    >>> @switch("verbosity", "-v", repeatable=True, descr="be noisier")
    ... def on_verbose(invocations, values, defaulted, context):
    ...     context.options.verbosity = invocations
    ...     return Continue()
"""
import builtins
import re
from collections.abc import Mapping
from types import MappingProxyType

from .execution import Continue
from .utils import *

_SHORT = re.compile(r"-[^\s=-]")
_LONG = re.compile(r"--[^\W\d_](-?[^\W_]+)*")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize switch metadata in place.

    Raises
    - TypeError: wrong types, or argument-only fields on an argument-less switch.
    - ValueError: empty strings, malformed or duplicated flags.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not metadata["flags"]:
        raise TypeError(f"{cls.__typename__} must specify at least one flag")

    shorts, longs = set(), set()
    for flag in metadata["flags"]:
        if not isinstance(flag, str):
            raise TypeError(f"{cls.__typename__} flags must be strings")
        elif _SHORT.fullmatch(flag):
            bucket = shorts
        elif _LONG.fullmatch(flag):
            bucket = longs
        else:
            raise ValueError(f"{cls.__typename__} flag {flag!r} must look like '-x' or '--long-name'")
        if flag in shorts or flag in longs:
            raise ValueError(f"{cls.__typename__} flags cannot contain duplicates")
        bucket.add(flag)
    metadata["shorts"] = frozenset(shorts)
    metadata["longs"] = frozenset(longs)
    del metadata["flags"]

    for field in ("descr", "details"):
        if not isinstance(value := metadata[field], str | Unset):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        metadata[field] = coalesce(value)

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")
    if metadata["validator"] is not Unset and not callable(metadata["validator"]):
        raise TypeError(f"{cls.__typename__} 'validator' must be callable")

    if not isinstance(options := coalesce(metadata["options"], {}), Mapping):
        raise TypeError(f"{cls.__typename__} 'options' must be a mapping")
    elif not all(isinstance(key, str) and key.isidentifier() for key in options):
        raise ValueError(f"{cls.__typename__} 'options' keys must be identifiers")
    metadata["options"] = dict(options)

    # Argument-only fields make no sense without an argument.
    if metadata["metavar"] is None:
        if metadata["required"]:
            raise TypeError(f"{cls.__typename__} without a 'metavar' cannot be 'required'")
        if metadata["default"] is not Unset:
            raise TypeError(f"{cls.__typename__} without a 'metavar' cannot have a 'default'")
        if metadata["validator"] is not Unset:
            raise TypeError(f"{cls.__typename__} without a 'metavar' cannot have a 'validator'")


class SwitchDefinition(metaclass=SpecType):
    """
    A named command-line switch.

    Definitions are immutable once built: every field is exposed through a
    read-only property. The bound handler (see @switch) is invoked through
    __call__; a definition without a handler simply continues.
    """

    __introspectable__ = (
        "name",
        "shorts",
        "longs",
        "metavar",
        "required",
        "default",
        "type",
        "validator",
        "repeatable",
        "commandlike",
        "options",
        "descr",
        "details",
    )

    __displayable__ = (
        "name",
        "shorts",
        "longs",
        "metavar",
        "default",
        "repeatable",
        "commandlike",
    )

    def __init__(
            self,
            name,
            /,
            *flags,
            metavar=Unset,
            required=False,
            default=Unset,
            type=str,
            validator=Unset,
            repeatable=False,
            commandlike=False,
            options=Unset,
            descr=Unset,
            details=Unset
    ):
        metadata = {
            "name": name,
            "flags": flags,
            "metavar": metavar,
            "required": bool(required),
            "default": default,
            "type": type,
            "validator": validator,
            "repeatable": bool(repeatable),
            "commandlike": bool(commandlike),
            "options": options,
            "descr": descr,
            "details": details,
        }
        _sanitize_metadata(builtins.type(self), metadata)

        self._callback = Unset
        for field, value in metadata.items():
            setattr(self, "_" + field, value)

    @property
    def flags(self):
        """
        All flags in display order: short flags first, then long flags.
        """
        return tuple(sorted(self._shorts, key=_sortkey)) + tuple(sorted(self._longs, key=_sortkey))

    @property
    def argumented(self):
        """
        True when this switch carries an argument.
        """
        return self._metavar is not None

    @property
    def optional(self):
        """
        True when the argument may be omitted (the default is used instead).
        """
        return self.argumented and not self._required

    def convert(self, raw, /):
        """
        Convert and validate one raw value.

        Raises whatever the converter or validator raises (ValueError or
        TypeError by convention); the lexer turns those into usage errors.
        """
        value = self._type(raw)
        if self._validator is not Unset:
            self._validator(value)
        return value

    def __call__(self, invocations, values, defaulted, context, /):
        if self._callback is Unset:
            return Continue()
        return self._callback(invocations, values, defaulted, context)


def _sortkey(flag):
    return flag.lstrip("-").lower(), flag


def switch(*args, **kwargs):
    """
    Decorator/factory for defining a switch and its handler.

    Usage
        @switch("level", "-l", "--level", metavar="LEVEL", type=int, default=1)
        def on_level(invocations, values, defaulted, context):
            context.options.level = values[-1]
            return Continue()

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Returns the configured SwitchDefinition with the function bound.
    """
    definition = SwitchDefinition(*args, **kwargs)

    @rename("switch")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@switch() must be applied to a callable")
        if definition._callback is not Unset:
            raise TypeError("@switch() must be applied only once")
        definition._callback = callback
        return definition

    return wrapper


class SwitchDefinitionSet(Mapping):
    """
    Immutable, insertion-ordered mapping of switch name → SwitchDefinition.

    Iteration order is execution order. Names are unique within a set;
    composing two sets with `|` keeps the left-hand definition (and its
    position) on a name clash, so engine switches take precedence over
    command switches.

    Flag lookup is first-come as well: a flag already claimed by an earlier
    definition is not re-bound by a later one.
    """

    def __init__(self, definitions=(), /):
        self._definitions = {}
        self._flags = {}
        for definition in definitions:
            if not isinstance(definition, SwitchDefinition):
                raise TypeError("switch definition set items must be switch definitions")
            if definition.name in self._definitions:
                raise ValueError(f"switch definition set cannot contain duplicate name {definition.name!r}")
            self._add(definition)

    def _add(self, definition):
        self._definitions[definition.name] = definition
        for flag in definition.flags:
            self._flags.setdefault(flag, definition)

    def __getitem__(self, name, /):
        return self._definitions[name]

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self):
        return len(self._definitions)

    def __or__(self, other, /):
        if not isinstance(other, SwitchDefinitionSet):
            return NotImplemented
        composed = SwitchDefinitionSet(self.values())
        for name, definition in other.items():
            if name not in composed._definitions:
                composed._add(definition)
        return composed

    def __repr__(self):
        return "switch-definition-set(%s)" % ", ".join(map(repr, self._definitions))

    @property
    def flags(self):
        """
        Read-only flag → definition view (e.g. {"-v": ..., "--verbose": ...}).
        """
        return MappingProxyType(self._flags)

    def lookup(self, flag, /):
        """
        Return the definition triggered by `flag`, or None.
        """
        return self._flags.get(flag)

    def display_order(self):
        """
        Sort switches the way help output lists them.

        Returns a read-only mapping with:
        - "shorts": short flags without arguments, e.g. ["-h", "-v"]
        - "longs": long flags without arguments, e.g. ["--help"]
        - "short_args": short flag → definition, for switches with arguments
        - "long_args": long flag → definition, for switches with arguments
        - "all": every flag → definition, sorted (details are rendered once
          per definition by skipping names already seen)
        """
        flags = sorted(self._flags.items(), key=lambda item: _sortkey(item[0]))
        return MappingProxyType({
            "shorts": [flag for flag, definition in flags if flag in definition.shorts and not definition.argumented],
            "longs": [flag for flag, definition in flags if flag in definition.longs and not definition.argumented],
            "short_args": {flag: definition for flag, definition in flags if flag in definition.shorts and definition.argumented},
            "long_args": {flag: definition for flag, definition in flags if flag in definition.longs and definition.argumented},
            "all": dict(flags),
        })


class SwitchRegistry:
    """
    Engine-level switch definitions.

    register() keys definitions by name; registering a name twice silently
    replaces the earlier definition (last registration wins). build() hands
    out a fresh SwitchDefinitionSet per resolution attempt and never mutates
    either source.
    """

    def __init__(self, definitions=(), /):
        self._definitions = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition, /):
        if not isinstance(definition, SwitchDefinition):
            raise TypeError("switch registry can only register switch definitions")
        self._definitions[definition.name] = definition
        return definition

    @property
    def definitions(self):
        """
        Engine switches only, as a SwitchDefinitionSet.
        """
        return SwitchDefinitionSet(self._definitions.values())

    def build(self, command=None, /):
        """
        All engine switches followed by `command`'s own switches (if any).
        """
        definitions = self.definitions
        if command is None:
            return definitions
        return definitions | command.switches

    def __contains__(self, name, /):
        return name in self._definitions

    def __iter__(self):
        return iter(self._definitions.values())

    def __len__(self):
        return len(self._definitions)


def inrange(low, high, /):
    """
    Build a validator accepting integers between low and high (inclusive).

    Example
        @switch("level", "--level", metavar="LEVEL", type=int, validator=inrange(1, 5))
    """
    if not isinstance(low, int) or not isinstance(high, int):
        raise TypeError("inrange() bounds must be integers")
    if low > high:
        raise ValueError("inrange() lower bound cannot exceed the upper bound")

    @rename("inrange")
    def validator(value, /):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("expected an integer, got %r" % (value,))
        if not low <= value <= high:
            raise ValueError("must be between %d and %d, got %d" % (low, high, value))

    return validator


__all__ = (
    # Classes
    "SwitchDefinition",
    "SwitchDefinitionSet",
    "SwitchRegistry",

    # Decorators / factories
    "switch",
    "inrange",
)
