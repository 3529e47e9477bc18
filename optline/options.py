r"""
Optline option descriptors and the option compiler.

Overview
- Option: one declarative rule. Trigger aliases (e.g., -f/--force), accepted
  value type(s), an optional whitelist map, an optional default, the array
  flag and an optional target path.
- compile(options): turn a list of Option instances (or descriptor mappings)
  into a CompiledOptions lookup from every trigger to its compiled option.

Compilation
- each descriptor is deep-copied first, so neither later changes by the
  caller nor the compiler's own normalization can leak into the caller's list.
- the type list is resolved and sorted into the fixed precedence order
  (none < float < integer < boolean < json < string).
- a trigger that shows up twice is remapped to the later option; the clash is
  reported as a DuplicateTriggerWarning and never stops compilation.

Targets
- an option writes into its `target` path of the result. Without an explicit
  target the longest trigger (first one on ties) stripped of leading dashes is
  used: ("-o", "--output") -> "output".

Quick example:
    >>> compiled = compile([
    ...     Option("-v", "--verbose", type="none"),
    ...     {"triggers": ["--level"], "type": ["integer"], "default": 3},
    ... ])
    >>> sorted(compiled)
    ['--level', '--verbose', '-v']
"""
import builtins
import copy
import functools
import operator
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from rich.text import Text

from . import log
from .faults import FaultCode, DuplicateTriggerWarning, trigger
from .types import ValueType, normalize
from .utils import *

logger = log.group("options")

_DESCRIPTOR_KEYS = frozenset(("type", "isArray", "target", "map", "default", "description"))


class OptionType(type):
    """
    Metaclass giving descriptor classes read-only attributes and stable reprs.

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property backed by
      the private "_{name}" attribute (see mirror()), unless the class body
      already defines it.
    - Provide __repr__/__rich_repr__ built from __introspectable__.
    - Derive __typename__ from the class name for messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        introspectable = namespace.get("__introspectable__", ())
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in introspectable if field not in namespace
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


def _derive_target(triggers):
    longest = ""
    for name in triggers:
        if len(name) > len(longest):
            longest = name
    return longest.lstrip("-")


def _sanitize_triggers(cls, triggers, /):
    if isinstance(triggers, str) or not isinstance(triggers, Iterable):
        raise TypeError(f"{cls.__typename__} triggers must be an iterable of strings")
    sanitized = []
    for name in triggers:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} triggers must be strings")
        elif not name or name.isspace():
            raise ValueError(f"{cls.__typename__} triggers cannot be empty")
        elif "=" in name:
            raise ValueError(f"{cls.__typename__} trigger {name!r} cannot contain '='")
        sanitized.append(name)
    if not sanitized:
        raise TypeError(f"{cls.__typename__} must specify at least one trigger")
    return sanitized


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the non-trigger fields in place.

    - type: ValueType, type name, or iterable of those; kept in declared order
      (compile() applies the precedence sort).
    - target: Unset or a non-empty string (blank strings become Unset).
    - map: Unset or a mapping keyed by raw strings.
    - description: Unset, a non-empty string, or a rich Text (blank strings
      become Unset).
    - array: coerced to bool. default: any value, not validated.
    """
    type = metadata["type"]
    if isinstance(type, str | ValueType):
        type = (type,)
    elif not isinstance(type, Iterable):
        raise TypeError(f"{cls.__typename__} 'type' must be a type name or an iterable of type names")
    metadata["type"] = [ValueType.of(entry) for entry in type]
    if not metadata["type"]:
        raise ValueError(f"{cls.__typename__} 'type' needs at least one value type")

    if not isinstance(target := metadata["target"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'target' must be a string")
    elif isinstance(target, str):
        # blank targets fall back to the derived one
        metadata["target"] = target.strip() or Unset

    if not isinstance(choices := metadata["map"], Mapping | Unset):
        raise TypeError(f"{cls.__typename__} 'map' must be a mapping")
    elif isinstance(choices, Mapping):
        if not all(isinstance(key, str) for key in choices):
            raise TypeError(f"{cls.__typename__} 'map' keys must be strings")
        metadata["map"] = dict(choices)

    if not isinstance(description := metadata["description"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str):
        metadata["description"] = description.strip() or Unset

    metadata["array"] = bool(metadata["array"])


class Option(metaclass=OptionType):
    """
    Declarative rule for one command-line option.

    Properties
    - triggers: the aliases that activate the option, in declared order.
    - type: accepted ValueTypes (declared order; compiled options hold them in
      precedence order).
    - array: when True the option may repeat and its values accumulate in a
      list at the target.
    - target: the result path; derived from the longest trigger when omitted.
    - map: optional whitelist {raw value: final value}. A final value given as
      {"value": ..., "description": ...} stores only its "value".
    - default: written at the target when no trigger for it was seen (Unset
      means no default; None is a real default).
    - description: inert help text.

    All properties are read-only and hand out deep copies.
    """

    __introspectable__ = (
        "triggers",
        "type",
        "array",
        "target",
        "map",
        "default",
        "description",
    )

    def __init__(
            self,
            *triggers,
            type=ValueType.STRING,
            array=False,
            target=Unset,
            map=Unset,
            default=Unset,
            description=Unset,
    ):
        cls = builtins.type(self)
        metadata = {
            "type": type,
            "array": array,
            "target": target,
            "map": map,
            "default": default,
            "description": description,
        }
        _sanitize_metadata(cls, metadata)

        self._triggers = _sanitize_triggers(cls, triggers)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def target(self):
        return nullify(self._target, _derive_target(self._triggers))

    def __replace__(self, **overrides):
        fields = {
            "triggers": self._triggers,
            "type": self._type,
            "array": self._array,
            "target": self._target,
            "map": self._map,
            "default": self._default,
            "description": self._description,
        } | overrides
        triggers = fields.pop("triggers")
        return builtins.type(self)(*triggers, **fields)

    @classmethod
    def from_mapping(cls, descriptor, /):
        """
        Build an Option from the plain descriptor shape.

        Keys: triggers (required), type, isArray, target, map, default,
        description. Other keys are ignored.
        """
        if not isinstance(descriptor, Mapping):
            raise TypeError("from_mapping() argument must be a mapping")
        fields = dict(descriptor)
        try:
            triggers = fields.pop("triggers")
        except KeyError:
            raise TypeError(f"{cls.__typename__} descriptor needs 'triggers'") from None
        if unknown := set(fields) - _DESCRIPTOR_KEYS:
            logger.debug("ignoring descriptor keys: %s", ", ".join(sorted(map(str, unknown))))
            for key in unknown:
                del fields[key]
        if "isArray" in fields:
            fields["array"] = fields.pop("isArray")
        if isinstance(triggers, str) or not isinstance(triggers, Iterable):
            raise TypeError(f"{cls.__typename__} triggers must be an iterable of strings")
        return cls(*triggers, **fields)


class CompiledOptions(Mapping):
    """
    Read-only lookup from every trigger to its compiled Option.

    Extras
    - targets: unique target -> first compiled option that writes it, in
      trigger insertion order (drives the defaults pass of the parser).
    - warnings: diagnostics raised while compiling (duplicate triggers).
    """

    def __init__(self, options, /, warnings=()):
        self._options = dict(options)
        targets = {}
        for option in self._options.values():
            targets.setdefault(option.target, option)
        self._targets = MappingProxyType(targets)
        self._warnings = tuple(warnings)

    def __getitem__(self, trigger, /):
        return self._options[trigger]

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    @property
    def targets(self):
        return self._targets

    @property
    def warnings(self):
        return self._warnings

    def __repr__(self):
        return "compiled-options(%s)" % ", ".join(map(repr, self._options))


def _prepare(option, /):
    if isinstance(option, Option):
        return copy.deepcopy(option)
    if isinstance(option, Mapping):
        return Option.from_mapping(copy.deepcopy(option))
    raise TypeError("compile() items must be options or descriptor mappings, not %s" % builtins.type(option).__name__)


def compile(options, /, *, diagnostics=Unset):
    """
    compile option descriptors into a trigger lookup.

    parameters
    - options: Iterable[Option | Mapping]
      descriptors in declaration order. mappings use the plain descriptor
      shape (see Option.from_mapping()).
    - diagnostics: Unset | Callable[[DuplicateTriggerWarning], Any]
      receives every non-fatal diagnostic. when Unset, diagnostics are
      surfaced with trigger(), i.e. through warnings.warn.

    returns
    - CompiledOptions. compilation itself never fails on duplicates; invalid
      descriptor shapes raise TypeError/ValueError from Option.
    """
    if not isinstance(options, Iterable) or isinstance(options, str | Mapping):
        raise TypeError("compile() argument must be an iterable of options")
    if diagnostics is not Unset and not callable(diagnostics):
        raise TypeError("compile() 'diagnostics' must be callable")

    compiled = {}
    warnings = []
    for option in options:
        prepared = _prepare(option)
        option = copy.replace(prepared, type=normalize(prepared.type))
        for name in option.triggers:
            if name in compiled:
                warning = DuplicateTriggerWarning(
                    "duplicate trigger %r detected, overwriting" % name,
                    title="duplicate trigger",
                    code=FaultCode.DUPLICATE_TRIGGER,
                    trigger=name,
                    hint="give every option its own triggers",
                )
                logger.warning("duplicate trigger %r detected, overwriting", name)
                warnings.append(warning)
            compiled[name] = option

    logger.debug("compiled %d trigger(s) for %d target(s)", len(compiled), len({option.target for option in compiled.values()}))

    result = CompiledOptions(compiled, warnings)
    for warning in warnings:
        if diagnostics is Unset:
            trigger(warning)
        else:
            diagnostics(warning)
    return result


__all__ = (
    "Option",
    "CompiledOptions",
    "compile",
)
