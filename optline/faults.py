"""
Optline faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ParseError / ParseWarning: base types that carry a message plus an immutable
  options mapping and know how to render and surface themselves.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Integration
- parse() raises the first ParseError it meets; nothing is aggregated.
- compile() reports duplicate triggers as DuplicateTriggerWarning, which is
  never fatal.
- In non-shell mode errors are raised and warnings go through warnings.warn;
  in shell mode both are printed on a Rich stderr console.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - triggers and targets (1111x)
      • UNKNOWN_TRIGGER, DUPLICATED_TARGET, MISSING_VALUE, TOO_MANY_VALUES
    - values (1112x)
      • INVALID_CHOICE, PARSING_FAILED
    - compilation warnings (1211x)
      • DUPLICATE_TRIGGER
    """
    # --- trigger/target errors ---
    UNKNOWN_TRIGGER   = 11112
    DUPLICATED_TARGET = 11115
    MISSING_VALUE     = 11117
    TOO_MANY_VALUES   = 11118

    # --- value errors ---
    INVALID_CHOICE    = 11124
    PARSING_FAILED    = 11126

    # --- warnings ---
    DUPLICATE_TRIGGER = 12113

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(sys.modules.get("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    main = sys.modules.get("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    prog = text(getattr(main, "__prog__", fault.options.get("prog", "optline")), "prog-name")
    header = Text.assemble("[ ", prog)
    if code := fault.options.get("code"):
        header.append_text(Text.assemble(" — ", text(code.normalize(), "code")))
    if title := fault.options.get("title"):
        header.append_text(Text.assemble(" | ", text(title.title(), "title")))
    header.append(" ]")

    message = text(fault.message, "message")
    renders = [message]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ParseError(Exception):
    """
    base class of every error raised while parsing an argument line.

    attributes
    - message: str, the user-facing text (from the message templates).
    - options: read-only mapping with the fault context, e.g. code, title,
      hint, trigger, value, types, allowed, target, index.
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return _rebuild, (type(self), self.message, dict(self.options))


class UnknownTriggerError(ParseError): ...
class DuplicateTargetError(ParseError): ...
class MissingValueError(ParseError): ...
class TooManyValuesError(ParseError): ...
class ParsingFailedError(ParseError): ...
class InvalidChoiceError(ParseError): ...


class ParseWarning(Warning):
    """
    base class of non-fatal diagnostics.
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return _rebuild, (type(self), self.message, dict(self.options))


class DuplicateTriggerWarning(ParseWarning): ...


def _rebuild(cls, message, options):
    return cls(message, **options)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - outside shell mode errors are raised and warnings are emitted with
      warnings.warn; in shell mode both are printed, and errors exit with 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParseError",
    "UnknownTriggerError",
    "DuplicateTargetError",
    "MissingValueError",
    "TooManyValuesError",
    "ParsingFailedError",
    "InvalidChoiceError",
    "ParseWarning",
    "DuplicateTriggerWarning",
    "trigger",
)
