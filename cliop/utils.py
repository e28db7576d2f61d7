"""
cliop utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the registry, the tokenizer and the binding layer.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the arguments/commands layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with
    copies for containers to discourage accidental mutation of public state.

- Token helpers
  • dashes(token): count the leading run of '-' characters.
  • undash(token): the token without its leading run of '-' characters.
  • malformed(name): whether a name cannot be used as an option or command name.
  • split(value) / join(values): NUL-separated multi-value encoding used by the store.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> dashes("--name"), undash("--name")
    (2, 'name')
    >>> split(join(["a", "b"]))
    ['a', 'b']
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final

SEPARATOR = "\0"


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case the provided
    default is returned. Falsey values like None, 0 or "" are preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce("", "fallback")     -> ""
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name) -> decorator

    Raises
    - TypeError: non-callable target, non-string name, or wrong arity.
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
                # Some callables (e.g., built-ins) disallow attribute updates.
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


def _immortalize(object):
    """
    Recursively copy container values so callers cannot mutate backing state.

    - Sequence (non-string) → new list
    - Mapping → new dict (keys preserved, values processed)
    - Set → new set
    - anything else → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a copy
    for container types.

    Example
    - Given self._options, declare options = mirror("options").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def dashes(token, /):
    """
    Count the leading '-' characters of a token.

    A token made only of dashes returns its full length, which callers use to
    tell "-" and "---" apart from real options.
    """
    return len(token) - len(token.lstrip("-"))


def undash(token, /):
    """
    Return the token without its leading run of '-' characters.
    """
    return token.lstrip("-")


def malformed(name, /):
    """
    Whether a name is unusable as an option long name, a sub-command name, or
    an option value: empty, leading '-', or carrying an '='.
    """
    return not name or name.startswith("-") or "=" in name


def split(value, /):
    """
    Split a NUL-joined multi-value string into its items.

    The empty string yields an empty list (an option that was never given),
    not a list holding one empty item.
    """
    if not value:
        return []
    return value.split(SEPARATOR)


def join(values, /):
    """
    Join items with the NUL separator used for repeated option values.
    """
    return SEPARATOR.join(values)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: equality and identity checks must not treat it as None.
- Typical pattern: value = coalesce(user_value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "dashes",
    "undash",
    "malformed",
    "split",
    "join",

    # Types
    "UnsetType",

    # Constants
    "Unset",
    "SEPARATOR",
)
