r"""
cliop option definitions and the argument store.

Overview
- Definitions
  • Option: one named option (short letter, long name, attributes, positional
    bind index, default value, environment source, description).
  • Attribute: bit flags for the option shape (ARGUMENT, REQUIRED, REPEATED).
  • Option.parse(spec, descr): the declarative mini-grammar, producing the very
    same Option the structured constructor would.

- Storage
  • Store: the per-cycle accumulation of parsed values. Maps a long name (or a
    bare letter for unknown short flags) to a string value and keeps the
    ordered list of positional arguments. Repeated values are NUL-joined.

- Introspection & representation
  • OptionType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ through read-only properties.

Spec-string grammar (tokens separated by whitespace, any order)
  -X            short name X
  #N            positional bind index N
  $NAME         environment variable consulted when the option is absent
  [default]     default value
  --long        presence-only flag
  --long=       argument-taking option; "?" after "=" marks it required and
                "+" marks it repeatable (e.g. --input=?+)
Tokens shorter than two characters or matching no form are ignored; a later
token for the same field replaces an earlier one.

Quick example:
    >>> from cliop.arguments import Option, Attribute
    >>> Option.parse("-n #1 $APP_NAME --name=? [world]", "who to greet")
    option(short='n', long='name', argument=True, required=True, ...)
    >>> Option("n", "name", "who to greet", default="world",
    ...        attrs=Attribute.ARGUMENT | Attribute.REQUIRED, index=1, env="APP_NAME")
    option(short='n', long='name', argument=True, required=True, ...)

Public API
- Classes: Option, Store
- Flags: Attribute
"""
import functools
import operator
import re
from enum import IntFlag

from rich.text import Text

from .utils import *


class Attribute(IntFlag):
    """
    Option shape flags.

    - ARGUMENT: the option takes a value (otherwise it is a presence-only flag).
    - REQUIRED: the option must be given (checked after parsing).
    - REPEATED: every occurrence is kept, in order.
    """
    ARGUMENT = 1
    REQUIRED = 2
    REPEATED = 4


class OptionType(type):
    """
    Metaclass wiring read-only fields and stable representations.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_<name>" field.
    - Provide compact __repr__ and __rich_repr__ implementations.
    - Derive __typename__ (camel-case split with hyphens) for messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with every field.

            Example
            - option(short='v', long='verbose', argument=False, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Option(metaclass=OptionType):
    """
    A single option definition.

    Fields are validated for their Python types only. Naming rules (a usable
    long name, an ASCII short letter, uniqueness) belong to the registry in
    Command.add_option(), where they are reported through the catch policy
    rather than raised.

    Properties
    - short: the short letter, or "" when the option has none.
    - long: the long name; the key under which values are stored.
    - argument/required/repeated: shape flags (see Attribute).
    - index: 1-based positional bind slot, 0 when unbound.
    - default: default value used when the option is absent.
    - env: environment variable consulted before the default ("" for none).
    - descr: one-line description for the usage screen.
    """

    __introspectable__ = (
        "short",
        "long",
        "argument",
        "required",
        "repeated",
        "index",
        "default",
        "env",
        "descr",
    )

    def __init__(self, short, long, /, descr="", *, default="", attrs=Attribute(0), index=0, env=""):
        """
        Construct an Option.

        Parameters
        - short: None | str of at most one character ("" or None: no short name).
        - long: str, the long name (without dashes).
        - descr: str | Text, description for the usage screen.
        - default: str, value reported when the option is absent.
        - attrs: Attribute flags (or their integer value).
        - index: int >= 0, positional bind slot.
        - env: str, environment variable name.

        Raises
        - TypeError: when a field has the wrong Python type.
        - ValueError: when short holds more than one character or index is negative.
        """
        if not isinstance(short := coalesce(short, ""), str | None):
            raise TypeError(f"{type(self).__typename__} 'short' must be a string or None")
        if short is not None and len(short) > 1:
            raise ValueError(f"{type(self).__typename__} 'short' must be a single character")
        if not isinstance(long, str):
            raise TypeError(f"{type(self).__typename__} 'long' must be a string")
        if not isinstance(descr, str | Text):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")
        if not isinstance(default, str):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")
        if not isinstance(attrs, int) or isinstance(attrs, bool):
            raise TypeError(f"{type(self).__typename__} 'attrs' must be attribute flags")
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"{type(self).__typename__} 'index' must be an integer")
        if index < 0:
            raise ValueError(f"{type(self).__typename__} 'index' cannot be negative")
        if not isinstance(env, str):
            raise TypeError(f"{type(self).__typename__} 'env' must be a string")

        attrs = Attribute(attrs)
        self._short = short or ""
        self._long = long
        self._argument = Attribute.ARGUMENT in attrs
        self._required = Attribute.REQUIRED in attrs
        self._repeated = Attribute.REPEATED in attrs
        self._index = index
        self._default = default
        self._env = env
        self._descr = descr

    @property
    def attrs(self):
        """The shape flags recombined into an Attribute value."""
        attrs = Attribute(0)
        if self._argument:
            attrs |= Attribute.ARGUMENT
        if self._required:
            attrs |= Attribute.REQUIRED
        if self._repeated:
            attrs |= Attribute.REPEATED
        return attrs

    @classmethod
    def parse(cls, spec, descr="", /):
        """
        Build an Option from the declarative spec-string grammar.

        See the module documentation for the token forms. Parsing never fails:
        unrecognized tokens are skipped and an absent long name yields an
        Option with an empty long name (rejected later by the registry when
        OPTION_INVALID is caught).

        Raises
        - TypeError: when spec is not a string.
        """
        if not isinstance(spec, str):
            raise TypeError(f"{cls.__typename__} spec must be a string")

        short = ""
        long = ""
        index = 0
        env = ""
        default = ""
        attrs = Attribute(0)

        for word in spec.split():
            if len(word) < 2:
                continue
            if len(word) == 2 and word[0] == "-" and word[1] != "-":
                short = word[1]
            elif word[0] == "#":
                # leading digits only, like atoi: "#2x" -> 2, "#x" -> 0
                index = int(match[0]) if (match := re.match(r"[+-]?\d+", word[1:])) else 0
                index = max(index, 0)
            elif word[0] == "$":
                env = word[1:]
            elif word[0] == "[" and word[-1] == "]":
                default = word[1:-1]
            elif len(word) > 2 and word.startswith("--"):
                name, equal, flags = word[2:].partition("=")
                long = name
                attrs = Attribute(0)
                if equal:
                    attrs |= Attribute.ARGUMENT
                    if "?" in flags:
                        attrs |= Attribute.REQUIRED
                    if "+" in flags:
                        attrs |= Attribute.REPEATED

        return cls(short, long, descr, default=default, attrs=attrs, index=index, env=env)

    def __str__(self):
        """
        Render the option back into the spec-string grammar.

        Example: "-n #1 $APP_NAME --name=? [world]". The default is omitted for
        required options since it can never apply.
        """
        parts = []
        if self._short:
            parts.append("-" + self._short)
        if self._index:
            parts.append("#%d" % self._index)
        if self._env:
            parts.append("$" + self._env)
        name = "--" + self._long
        if self._argument:
            name += "=" + "?" * self._required + "+" * self._repeated
        parts.append(name)
        if self._default and not self._required:
            parts.append("[%s]" % self._default)
        return " ".join(parts)

    def __eq__(self, other):
        if not isinstance(other, Option):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    __hash__ = None


class Store:
    """
    Accumulated parse results for one cycle.

    Contents
    - options: dict mapping a long name (or a bare letter for unknown short
      flags, or a raw name for unknown "name=value" tokens) to its string value.
      Repeated values are joined with SEPARATOR.
    - positionals: ordered leftover arguments.

    Write rules
    - save() keeps the first value of a non-repeatable key and appends the
      values of a repeatable key.
    - mark() sets a presence flag to "1" whatever it held before.
    - Keys captured by freeze() are never written again until clear(); this is
      how configuration values stay below the command line in precedence.
    """

    options = mirror("options")
    positionals = mirror("positionals")

    def __init__(self):
        self._options = {}
        self._positionals = []
        self._frozen = frozenset()

    def save(self, key, value, /, repeated=False):
        if key in self._frozen:
            return
        if key not in self._options:
            self._options[key] = value
        elif repeated:
            # an empty first value leaves no leading separator
            self._options[key] = self._options[key] + SEPARATOR + value if self._options[key] else value

    def mark(self, key, /):
        """Record a presence flag as "1", replacing any earlier value."""
        if key not in self._frozen:
            self._options[key] = "1"

    def append(self, positional, /):
        self._positionals.append(positional)

    def consume(self, count, /):
        """Remove and return the first `count` positional arguments."""
        consumed, self._positionals[:count] = self._positionals[:count], []
        return consumed

    def freeze(self):
        self._frozen = frozenset(self._options)

    def clear(self):
        self._options.clear()
        self._positionals.clear()
        self._frozen = frozenset()

    def get(self, key, default="", /):
        return self._options.get(key, default)

    def __contains__(self, key):
        return key in self._options

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return "store(options=%r, positionals=%r)" % (self._options, self._positionals)


__all__ = (
    # Classes
    "Option",
    "Store",

    # Flags
    "Attribute",
)

del OptionType
