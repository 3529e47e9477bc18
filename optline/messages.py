"""
Error message templates.

Every parse failure is worded by one template, keyed by the kind of fault.
Hosts can swap any subset (for translations or house style) by handing a
mapping of callables to parse(); the rest fall back to DEFAULTS.
"""
from collections.abc import Mapping
from types import MappingProxyType

from .utils import Unset


def _listing(items):
    return ", ".join(map(str, items))


DEFAULTS = MappingProxyType({
    "unknown_trigger":
        lambda trigger: "Unknown trigger: %s" % trigger,
    "option_cannot_be_repeated":
        lambda target: "Option for target '%s' cannot be specified more than once." % target,
    "missing_value":
        lambda trigger: "Option '%s' requires a value." % trigger,
    "too_many_values":
        lambda trigger: "Option '%s' does not accept multiple values." % trigger,
    "parsing_failed":
        lambda trigger, value, types: "For option '%s', value '%s' could not be parsed into any of the allowed types: %s" % (
            trigger, value, _listing(types)
        ),
    "invalid_value_from_map":
        lambda trigger, value, allowed: "Invalid value '%s' for option '%s'. Allowed values: %s" % (
            value, trigger, _listing(allowed)
        ),
})


def resolve(overrides=Unset, /):
    """
    merge `overrides` over DEFAULTS and return a read-only mapping.

    errors
    - TypeError when overrides is not a mapping, names an unknown template,
      or supplies something that is not callable.
    """
    if overrides is Unset or overrides is DEFAULTS:
        return DEFAULTS
    if not isinstance(overrides, Mapping):
        raise TypeError("message templates must be a mapping")
    for name, template in overrides.items():
        if name not in DEFAULTS:
            raise TypeError("unknown message template %r" % name)
        if not callable(template):
            raise TypeError("message template %r must be callable" % name)
    return MappingProxyType(DEFAULTS | dict(overrides))


__all__ = (
    "DEFAULTS",
    "resolve",
)
