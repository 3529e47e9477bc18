"""
Optline parser: consume an argument line against compiled options.

What this module provides
- parse(compiled, line, messages): the single-pass consumption loop. It
  returns a fresh result tree (nested dicts/lists) or raises the first
  ParseError it meets.
- Parser: a small runtime front-end that compiles once, reads sys.argv by
  default and renders faults with Rich when running as a shell tool.

Consumption, token by token
1. split the token on its first '=' into a trigger and an inline value.
2. resolve the trigger; unknown triggers fail at once.
3. a non-array target may only be written once per call.
4. gather raw values:
   • inline value → split on ',' (an empty inline value gives none);
   • no inline value and neither "none" nor "boolean" accepted → take the
     following tokens until one resolves to a known trigger (a single token
     unless the option is an array);
   • otherwise presence alone is meaningful.
5. "none" sets the target to True; a bare "boolean" does the same; any other
   option without values fails, and a non-array option with several fails.
6. each raw value goes through the whitelist map when there is one, or the
   coercion engine otherwise.
7. arrays extend the list at their target, everything else overwrites.
Finally every untouched target with a default receives a copy of it.
"""
import difflib
import os.path
import sys
from collections.abc import Iterable, Mapping

from . import log
from . import messages as templates
from . import paths
from . import tokenizer
from .faults import *
from .options import CompiledOptions, compile
from .types import ValueType, CoercionError, coerce
from .utils import *

logger = log.group("parser")


def _resolve(token):
    """
    split a token into (trigger, inline value); the value is Unset without '='.
    """
    name, separator, value = token.partition("=")
    return name, value if separator else Unset


def _tokens(line):
    if isinstance(line, str):
        return tokenizer.split(line)
    if not isinstance(line, Iterable):
        raise TypeError("parse() argument must be a string or an iterable of strings")
    tokens = list(line)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be a string or an iterable of strings")
    return tokens


def _hint(name, compiled):
    suggestions = difflib.get_close_matches(name, list(compiled), 3)
    if suggestions:
        return "did you mean %r?" % suggestions[0]
    if compiled:
        return "known triggers: %s" % ", ".join(compiled)
    return "no triggers are defined"


def _choice(entry):
    if isinstance(entry, Mapping) and "value" in entry:
        return entry["value"]
    return entry


def parse(compiled, line, /, messages=Unset):
    """
    parse one argument line against compiled options.

    parameters
    - compiled: CompiledOptions
      the lookup produced by compile(); it is only read, never changed.
    - line: str | Iterable[str]
      a raw line (tokenized with tokenizer.split) or pre-split tokens, which
      are consumed as they are.
    - messages: Unset | Mapping[str, Callable[..., str]]
      replacement message templates (see optline.messages).

    returns
    - dict: the populated result tree.

    raises
    - UnknownTriggerError, DuplicateTargetError, MissingValueError,
      TooManyValuesError, ParsingFailedError, InvalidChoiceError: the first
      problem found; nothing partial is returned.
    """
    if not isinstance(compiled, CompiledOptions):
        raise TypeError("parse() first argument must be compiled options (see compile())")
    wording = templates.resolve(messages)
    tokens = _tokens(line)

    result = {}
    seen = set()

    def fail(cls, message, **options):
        logger.debug("parsing stopped at token %d: %s", options.get("index", -1), message)
        return cls(message, **options)

    index = 0
    while index < len(tokens):
        start = index
        name, inline = _resolve(tokens[index])

        try:
            option = compiled[name]
        except KeyError:
            raise fail(
                UnknownTriggerError,
                wording["unknown_trigger"](name),
                title="unknown trigger",
                code=FaultCode.UNKNOWN_TRIGGER,
                hint=_hint(name, compiled),
                trigger=name,
                index=start,
            ) from None

        target = option.target
        if not option.array and target in seen:
            raise fail(
                DuplicateTargetError,
                wording["option_cannot_be_repeated"](target),
                title="option repeated",
                code=FaultCode.DUPLICATED_TARGET,
                hint="pass %r only once" % name,
                trigger=name,
                target=target,
                index=start,
            )
        seen.add(target)

        types = option.type
        raws = []
        if inline is not Unset:
            if inline:
                raws = inline.split(",")
        elif ValueType.NONE not in types and ValueType.BOOLEAN not in types:
            cursor = index + 1
            while cursor < len(tokens):
                if _resolve(tokens[cursor])[0] in compiled:
                    break
                raws.append(tokens[cursor])
                cursor += 1
                if not option.array:
                    break
            index = cursor - 1
        index += 1

        if ValueType.NONE in types:
            paths.assign(result, target, True)
            logger.debug("%s -> %s = True", name, target)
            continue

        if not raws:
            if ValueType.BOOLEAN in types:
                paths.assign(result, target, True)
                logger.debug("%s -> %s = True", name, target)
                continue
            raise fail(
                MissingValueError,
                wording["missing_value"](name),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="provide a value (e.g., %s=value)" % name,
                trigger=name,
                target=target,
                index=start,
            )

        if not option.array and len(raws) > 1:
            raise fail(
                TooManyValuesError,
                wording["too_many_values"](name),
                title="too many values",
                code=FaultCode.TOO_MANY_VALUES,
                hint="pass a single value to %r" % name,
                trigger=name,
                target=target,
                values=tuple(raws),
                index=start,
            )

        choices = option.map
        values = []
        for raw in raws:
            if choices is not Unset:
                try:
                    values.append(_choice(choices[raw]))
                except KeyError:
                    raise fail(
                        InvalidChoiceError,
                        wording["invalid_value_from_map"](name, raw, list(choices)),
                        title="invalid value",
                        code=FaultCode.INVALID_CHOICE,
                        hint="choose one of: %s" % ", ".join(choices),
                        trigger=name,
                        value=raw,
                        allowed=tuple(choices),
                        index=start,
                    ) from None
                continue

            try:
                values.append(coerce(raw, types).value)
            except CoercionError as error:
                raise fail(
                    ParsingFailedError,
                    wording["parsing_failed"](name, raw, [str(type) for type in types]),
                    title="value not understood",
                    code=FaultCode.PARSING_FAILED,
                    hint="expected %s" % " or ".join(map(str, error.types)),
                    trigger=name,
                    value=raw,
                    types=error.types,
                    index=start,
                ) from None

        if option.array:
            existing = paths.lookup(result, target)
            if isinstance(existing, list):
                existing.extend(values)
            else:
                paths.assign(result, target, values)
        else:
            paths.assign(result, target, values[0])
        logger.debug("%s -> %s = %r", name, target, values if option.array else values[0])

    for target, option in compiled.targets.items():
        if target not in seen and (default := option.default) is not Unset:
            # Option.default hands out a fresh deep copy
            paths.assign(result, target, default)

    return result


class Parser:
    """
    Runtime front-end around compiled options.

    parameters
    - options: Iterable[Option | Mapping] | CompiledOptions
      descriptors to compile once (or an already compiled lookup).
    - messages: replacement message templates, validated up front.
    - shell: when True faults are printed on stderr (Rich) and errors exit
      with status 1; otherwise errors are raised and warnings go through
      warnings.warn.
    - colorful / fancy: plain vs styled text, and panel chrome, in shell mode.
    - prog: program name in rendered faults (defaults to sys.argv[0]'s
      basename; __main__.__prog__ wins over both).

    Example
        parser = Parser([Option("-v", "--verbose", type="none")], shell=True)
        settings = parser.parse()        # reads sys.argv[1:]
    """

    def __init__(
            self,
            options,
            /,
            *,
            messages=Unset,
            shell=False,
            colorful=True,
            fancy=False,
            prog=Unset,
    ):
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self.prog = nullify(prog, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "optline")
        self._messages = templates.resolve(messages)
        if isinstance(options, CompiledOptions):
            self._compiled = options
        else:
            self._compiled = compile(options, diagnostics=self.trigger)

    @property
    def compiled(self):
        return self._compiled

    def trigger(self, fault, /, **options):
        """
        surface a fault with this parser's runtime flags merged in.
        """
        trigger(
            fault,
            **options,
            shell=self.shell,
            colorful=self.colorful,
            fancy=self.fancy,
            prog=self.prog,
        )

    def parse(self, line=Unset, /):
        """
        parse `line` (sys.argv[1:] when Unset) and return the result tree.
        """
        if line is Unset:
            line = sys.argv[1:]
        try:
            return parse(self._compiled, line, self._messages)
        except ParseError as error:
            self.trigger(error)

    def __repr__(self):
        return "parser(prog=%r, triggers=%r)" % (self.prog, list(self._compiled))


__all__ = (
    "parse",
    "Parser",
)
