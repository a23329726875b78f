"""
Cliengine utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the switch, command and engine layers.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning "value not provided", distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers.

- mirror("attr")
  • Read-only property over a private backing field (self._attr). Containers
    are handed out frozen (tuple / frozenset / read-only mapping).

- hyphenate(name)
  • CamelCase class name to a hyphenated lowercase label (used for __typename__).

- SpecType
  • Metaclass for definition classes: mirrored read-only fields plus stable
    __repr__/__rich_repr__.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
import re
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used when None is a legitimate user value (a switch default of None, an
    absent command index) but the API still needs "not provided".

    Characteristics
    - Boolean-false, distinct from None and 0.
    - repr(Unset) -> "Unset".
    - Singleton per process, sealed against subclassing.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values other than Unset are returned untouched:
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow freeze of containers handed out through mirror().

    - list → tuple
    - dict → read-only mapping proxy
    - set → frozenset
    - anything else (already immutable, or a custom container) → as-is
    """
    if isinstance(object, list):
        return tuple(object)
    if isinstance(object, dict):
        return MappingProxyType(object)
    if isinstance(object, set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private field "_{name}".

    Containers are frozen on the way out so callers cannot mutate
    registration-time state through the public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def hyphenate(name, /):
    """
    Turn a CamelCase class name into a hyphenated lowercase label.

    - hyphenate("SwitchDefinition") -> "switch-definition"
    - hyphenate("Command")          -> "command"
    """
    if not isinstance(name, str):
        raise TypeError("hyphenate() argument must be a string")
    return re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower()


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Typical pattern: value = coalesce(user_value, default) to materialize a
fallback only when user_value is Unset.
"""


class SpecType(type):
    """
    Metaclass that turns definition classes into introspectable descriptors.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" field (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name for messages.

    Conventions
    - __displayable__ (if set) narrows which properties __rich_repr__ shows;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": hyphenate(name),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            )

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)

        if "__repr__" not in namespace:
            self.__repr__ = __repr__
        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__
        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "hyphenate",

    # Types
    "SpecType",
    "UnsetType",

    # Constants
    "Unset",
)
