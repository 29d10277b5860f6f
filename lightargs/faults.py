"""
lightargs faults (errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing fault. Codes are
  grouped by phase: definitions (2110x), resolution (2111x), lookups (2112x).
- ParserException: base type that carries a message plus options and knows how
  to render itself with rich.
- trigger(): central entry point to surface a fault, either by raising it or, in
  shell mode, by printing it and terminating with status 1.
- getdoc(): optional description lookup for a code from the host application.

Phases
- construction, validation: DefinitionError
- construction, resolution: RequiredArgumentMissingError, MissingValueForArgumentError
- lookup: UndefinedArgumentError, TypeParseError

Construction faults leave no usable parser. Lookup faults are per call and do
not touch the parser state.

Host customization (optional attributes of __main__)
- __prog__: program name shown in fault headers.
- __styles__: palette overrides.
- __codes__ / __docs__: labels and documentation for fault codes.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    - definitions (2110x)
      • INVALID_DEFINITION, DUPLICATED_DEFINITION
    - resolution (2111x)
      • REQUIRED_ARGUMENT_MISSING, MISSING_VALUE
    - lookups (2112x)
      • UNDEFINED_ARGUMENT, UNPARSABLE_VALUE
    """
    # --- definition errors (2110x) ---
    INVALID_DEFINITION          = 21101
    DUPLICATED_DEFINITION       = 21102

    # --- resolution errors (2111x) ---
    REQUIRED_ARGUMENT_MISSING   = 21111
    MISSING_VALUE               = 21112

    # --- lookup errors (2112x) ---
    UNDEFINED_ARGUMENT          = 21121
    UNPARSABLE_VALUE            = 21122

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParserException(Exception):
    """
    base class of every lightargs fault.

    options
    - code, title, hint: header and footer of the rendered fault; default to the
      class-level __code__ and __title__.
    - argument, usage: the argument involved, when there is one.
    - shell, console, exit, prog, fancy, colorful: runtime options merged in by
      trigger().
    """
    __code__ = Unset
    __title__ = "parser error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def usage(self):
        return self.options.get("usage")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(self.options.get("prog", getattr(main, "__prog__", "lightargs")), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))

        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        self.options.get("exit", sys.exit)(1)
        # the exit collaborator handed control back; the fault still stands
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DefinitionError(ParserException):
    __code__ = FaultCode.INVALID_DEFINITION
    __title__ = "invalid definition"


class RequiredArgumentMissingError(ParserException):
    __code__ = FaultCode.REQUIRED_ARGUMENT_MISSING
    __title__ = "required argument missing"


class MissingValueForArgumentError(ParserException):
    __code__ = FaultCode.MISSING_VALUE
    __title__ = "missing value"


class UndefinedArgumentError(ParserException):
    __code__ = FaultCode.UNDEFINED_ARGUMENT
    __title__ = "undefined argument"


class TypeParseError(ParserException):
    __code__ = FaultCode.UNPARSABLE_VALUE
    __title__ = "unparsable value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParserException).
    - options are merged into a copy of the fault before triggering.
    - outside shell mode the fault is raised; in shell mode it is printed to the
      `console` option and the `exit` option is called with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; returns None when there is no entry.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParserException",
    "DefinitionError",
    "RequiredArgumentMissingError",
    "MissingValueForArgumentError",
    "UndefinedArgumentError",
    "TypeParseError",
    "FaultCode",
    "trigger",
    "getdoc",
)
