"""
cliop typed bindings: push parsed strings into program variables.

Scope
- BindType: the discriminator over supported shapes (bool, str, int, float and
  a list of each of str/int/float).
- Binding: one typed slot. The slot is either an (object, attribute) pair,
  written with setattr(), or a (mutable mapping, key) pair, written by item
  assignment.
- matches()/convert(): the numeric grammar and the per-shape conversion.

Numeric grammar (strict check)
- int:   [+-]?[0-9]+
- float: [+-]?(digits[.digits] | .digits)([eE][+-]?digits)?
Hexadecimal, underscores, whitespace, "inf" and "nan" are all rejected.

Conversion without the strict check
- Elements that cannot be converted are skipped; a scalar that cannot be
  converted leaves the target untouched. Nothing is ever truncated to a
  partial number ("12abc" is not 12).
"""
import re
from collections.abc import MutableMapping
from enum import Enum

from .utils import *

_INTEGER = re.compile(r"[+-]?\d+")
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class BindType(Enum):
    BOOL = "bool"
    STR = "str"
    INT = "int"
    FLOAT = "float"
    STR_LIST = "list[str]"
    INT_LIST = "list[int]"
    FLOAT_LIST = "list[float]"

    @property
    def element(self):
        """Python type of a single element (the scalar type for scalars)."""
        return {
            BindType.BOOL: bool,
            BindType.STR: str,
            BindType.INT: int,
            BindType.FLOAT: float,
            BindType.STR_LIST: str,
            BindType.INT_LIST: int,
            BindType.FLOAT_LIST: float,
        }[self]

    @property
    def sequence(self):
        return self in (BindType.STR_LIST, BindType.INT_LIST, BindType.FLOAT_LIST)


_TYPES = {
    bool: BindType.BOOL,
    str: BindType.STR,
    int: BindType.INT,
    float: BindType.FLOAT,
    list: BindType.STR_LIST,
    list[str]: BindType.STR_LIST,
    list[int]: BindType.INT_LIST,
    list[float]: BindType.FLOAT_LIST,
}


def matches(kind, text, /):
    """
    Whether text is well-formed for the element type of kind.

    Strings and booleans always match; integers and floats follow the strict
    numeric grammar documented at module level.
    """
    if kind.element is int:
        return _INTEGER.fullmatch(text) is not None
    if kind.element is float:
        return _DECIMAL.fullmatch(text) is not None
    return True


def _scalar(kind, text):
    if not matches(kind, text):
        return Unset
    return kind.element(text)


def convert(kind, value, /, strict=False):
    """
    Convert a stored string value to the Python value for kind.

    Behavior
    - BOOL: not handled here (booleans come from presence, not from text).
    - scalars: the whole value converts as one element.
    - lists: the value is split on SEPARATOR and converted element by element.

    Returns
    - the converted value, or Unset when a scalar cannot be converted.

    Raises
    - ValueError: when strict is True and an element fails matches(); the
      offending element is carried as the exception argument.
    """
    if kind is BindType.BOOL:
        raise TypeError("convert() cannot convert to a boolean binding")

    items = split(value) if kind.sequence else [value]
    if strict:
        for item in items:
            if not matches(kind, item):
                raise ValueError(item)

    converted = [_scalar(kind, item) for item in items]
    if kind.sequence:
        return [item for item in converted if item is not Unset]
    return converted[0]


def resolve(type, current=Unset, /):
    """
    Resolve the BindType for an explicit type, or infer it from a current value.

    Accepted explicit types: a BindType, bool, str, int, float, list,
    list[str], list[int] and list[float].

    Inference from the current value: bool before int (bool is an int
    subclass); a list infers from its elements, defaulting to list[str] when
    empty or mixed.

    Raises
    - TypeError: unsupported type, or nothing to infer from.
    """
    if isinstance(type, BindType):
        return type
    if type is not Unset:
        try:
            return _TYPES[type]
        except (KeyError, TypeError):
            raise TypeError(f"unsupported binding type {type!r}") from None

    match current:
        case bool():
            return BindType.BOOL
        case str():
            return BindType.STR
        case int():
            return BindType.INT
        case float():
            return BindType.FLOAT
        case list():
            if current and all(isinstance(item, int) and not isinstance(item, bool) for item in current):
                return BindType.INT_LIST
            if current and all(isinstance(item, float) for item in current):
                return BindType.FLOAT_LIST
            return BindType.STR_LIST
        case _:
            raise TypeError(f"cannot infer a binding type from {current!r}, pass type= explicitly")


class Binding:
    """
    A typed slot receiving the resolved value of one option.

    Parameters
    - target: the object owning the attribute, or a mutable mapping.
    - slot: attribute name (objects) or key (mappings).
    - type: optional explicit type (see resolve()); inferred from the current
      slot value when omitted.

    Raises
    - TypeError: when slot is not a string for an object target, or when the
      type cannot be resolved.
    """

    kind = mirror("kind")
    target = mirror("target")
    slot = mirror("slot")

    def __init__(self, target, slot, /, type=Unset):
        if not isinstance(target, MutableMapping) and not isinstance(slot, str):
            raise TypeError("binding attribute name must be a string")
        self._target = target
        self._slot = slot
        self._kind = resolve(type, self.read() if type is Unset else Unset)

    def read(self):
        if isinstance(self._target, MutableMapping):
            return self._target.get(self._slot, Unset)
        return getattr(self._target, self._slot, Unset)

    def write(self, value, /):
        if isinstance(self._target, MutableMapping):
            self._target[self._slot] = value
        else:
            setattr(self._target, self._slot, value)

    def __repr__(self):
        return "binding(slot=%r, kind=%s)" % (self._slot, self._kind.value)


__all__ = (
    "BindType",
    "Binding",
    "matches",
    "convert",
    "resolve",
)
