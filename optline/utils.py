"""
Optline utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the options, parser and faults layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- nullify(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with
    deep copies of its value, so callers can never mutate the owner through it.

Quick examples
    >>> nullify(Unset, "fallback")
    'fallback'
    >>> nullify(None, "fallback") is None
    True
"""
import copy
import functools
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Option descriptors use it for `target`, `map`, `default` and `description`,
    because None is a legitimate default value and must stay distinguishable
    from “no default at all”.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
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

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance (copy/deepcopy/pickle keep it).
- Distinct from None: equality and identity checks must not treat it as None.
"""


def nullify(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case `default` is
    returned. Falsey values like None, 0, "" or [] are preserved as-is.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator that gives a generated callable a stable __name__/__qualname__,
    so tracebacks and reprs show `name` instead of the enclosing scope.

        @rename("float")
        def _float(value): ...
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorate(function):
        if not callable(function):
            raise TypeError("rename() must decorate a callable")
        try:
            function.__name__ = function.__qualname__ = name
        except (AttributeError, TypeError):
            raise TypeError("rename() cannot update %r" % function) from None
        return function

    return decorate


def mirror(name, /):
    """
    Define a read-only property over the private attribute "_{name}".

    The property answers with a deep copy, so containers keep their type
    (a tuple default stays a tuple) while nothing reachable from the value
    aliases the owner's state.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    @rename(name)
    def getter(self):
        return copy.deepcopy(getattr(self, attribute))

    return property(getter)


__all__ = (
    "nullify",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
