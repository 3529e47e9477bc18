"""
Value types and the coercion engine.

ValueType is a closed enumeration whose integer values encode the fixed
precedence order used when an option accepts several types:

    none < float < integer < boolean < json < string

coerce() walks an already ordered type list and returns the first successful
interpretation of a raw string. "none" never takes part in coercion: it only
changes how the parser gathers values (presence alone sets the target).
"""
import json
import math
import re
from collections.abc import Iterable
from enum import IntEnum
from typing import NamedTuple

from .utils import rename


class ValueType(IntEnum):
    """
    accepted value types, ordered by coercion precedence.
    """
    NONE    = 0
    FLOAT   = 1
    INTEGER = 2
    BOOLEAN = 3
    JSON    = 4
    STRING  = 5

    def __str__(self):
        return self.name.lower()

    @classmethod
    def of(cls, object, /):
        """
        resolve a ValueType from itself or from its case-insensitive name.
        """
        if isinstance(object, cls):
            return object
        if not isinstance(object, str):
            raise TypeError("value type must be a ValueType or a string, not %s" % type(object).__name__)
        try:
            return cls[object.strip().upper()]
        except KeyError:
            raise ValueError("unknown value type %r (expected one of: %s)" % (
                object, ", ".join(map(str, cls))
            )) from None


def normalize(types, /):
    """
    turn a single type or an iterable of types into a precedence-sorted tuple.

    the sort is stable, so repeated entries keep their relative position.
    """
    if isinstance(types, str | ValueType):
        types = (types,)
    elif not isinstance(types, Iterable):
        raise TypeError("value types must be a type name or an iterable of type names")
    resolved = tuple(map(ValueType.of, types))
    if not resolved:
        raise ValueError("at least one value type is required")
    return tuple(sorted(resolved))


class Coercion(NamedTuple):
    value: object
    type: ValueType


class CoercionError(ValueError):
    """
    raised by coerce() when no type accepts the raw value.
    """

    def __init__(self, value, types):
        self.value = value
        self.types = tuple(types)
        super().__init__("value %r could not be parsed as any of: %s" % (value, ", ".join(map(str, self.types))))


_REJECTED = object()

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_PREFIXED = re.compile(r"[+-]?0[xXoObB][0-9a-fA-F]+")

_TRUTHY = frozenset(("true", "1", "yes"))
_FALSY = frozenset(("false", "0", "no"))


def _number(value):
    """
    read a finite number from `value`, or return _REJECTED.

    accepts decimal and exponent literals and 0x/0o/0b prefixed integers,
    with surrounding whitespace. underscores, inf, nan and non-ASCII digits
    are refused.
    """
    if not (text := value.strip()) or "_" in text or not text.isascii():
        return _REJECTED
    if _PREFIXED.fullmatch(text):
        try:
            return int(text, 0)
        except ValueError:
            return _REJECTED
    try:
        number = float(text)
    except ValueError:
        return _REJECTED
    return number if math.isfinite(number) else _REJECTED


@rename("float")
def _float(value):
    number = _number(value)
    return _REJECTED if number is _REJECTED else float(number)


@rename("integer")
def _integer(value):
    if "." in value or (number := _number(value)) is _REJECTED:
        return _REJECTED
    if isinstance(number, int):
        return number
    # plain digits keep full precision; exponent forms truncate toward zero
    text = value.strip()
    return int(text) if _DECIMAL.fullmatch(text) else int(number)


@rename("boolean")
def _boolean(value):
    lowered = value.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return _REJECTED


@rename("json")
def _json(value):
    if not value or (value[0], value[-1]) not in (("{", "}"), ("[", "]")):
        return _REJECTED
    try:
        return json.loads(value)
    except ValueError:
        return _REJECTED


@rename("string")
def _string(value):
    return value


_COERCERS = {
    ValueType.FLOAT: _float,
    ValueType.INTEGER: _integer,
    ValueType.BOOLEAN: _boolean,
    ValueType.JSON: _json,
    ValueType.STRING: _string,
}


def coerce(value, types, /):
    """
    interpret `value` as the first type of `types` that accepts it.

    parameters
    - value: str
      raw textual value taken from the command line.
    - types: Iterable[ValueType]
      accepted types, already in precedence order (see normalize()).

    returns
    - Coercion(value, type) for the first type that accepted the string.

    raises
    - CoercionError naming the raw value and every attempted type.
    """
    if not isinstance(value, str):
        raise TypeError("coerce() first argument must be a string")
    types = tuple(types)
    for type in types:
        if type is ValueType.NONE:
            continue
        if (result := _COERCERS[type](value)) is not _REJECTED:
            return Coercion(result, type)
    raise CoercionError(value, types)


__all__ = (
    "ValueType",
    "Coercion",
    "CoercionError",
    "normalize",
    "coerce",
)
