"""
Typed parsing of argument literals.

The parser stores every resolved value as the literal string it found in the
argument vector (flags store "True"/"False"). A typed lookup turns that literal
into a Python value through parse_primitive(), which knows how to parse:

- the built-in primitives: str, int, float, complex, bool, Decimal, Fraction;
- any type implementing the SupportsParse protocol, i.e. a `__parse__`
  classmethod taking the literal and returning an instance or raising ValueError.

Every parse failure surfaces as ValueError. Asking for a type that has neither
capability is a programming error and raises TypeError.
"""
import builtins
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from types import MappingProxyType
from typing import Protocol, runtime_checkable


@runtime_checkable
class SupportsParse(Protocol):
    """
    capability of types that can be built from a single argument literal.
    """

    @classmethod
    def __parse__(cls, text, /): ...


def _parse_bool(text, /):
    # Accepts the textual form of the flag markers in any casing.
    match text.strip().casefold():
        case "true":
            return True
        case "false":
            return False
    raise ValueError(f"invalid literal for bool(): {text!r}")


def _parse_number(type, /):
    def parser(text, /):
        try:
            return type(text.strip())
        except (InvalidOperation, ZeroDivisionError):
            raise ValueError(f"invalid literal for {type.__name__}(): {text!r}") from None
    parser.__name__ = parser.__qualname__ = "_parse_" + type.__name__.lower()
    return parser


_PRIMITIVES = MappingProxyType({
    str: str,
    int: _parse_number(int),
    float: _parse_number(float),
    complex: _parse_number(complex),
    bool: _parse_bool,
    Decimal: _parse_number(Decimal),
    Fraction: _parse_number(Fraction),
})


def parsable(type, /):
    """
    Tell whether values of type can be parsed from an argument literal.
    """
    if not isinstance(type, builtins.type):
        return False
    return type in _PRIMITIVES or callable(getattr(type, "__parse__", None))


def parse_primitive(type, text, /):
    """
    Parse text into an instance of type.

    Raises
    - ValueError: text is not a valid literal for type.
    - TypeError: type cannot be parsed from a string at all, or text is not a string.
    """
    if not isinstance(text, str):
        raise TypeError("parse_primitive() second argument must be a string")
    if not parsable(type):
        raise TypeError(f"parse_primitive() cannot parse values of type {getattr(type, '__name__', type)!r}")
    if type in _PRIMITIVES:
        return _PRIMITIVES[type](text)
    return type.__parse__(text)


__all__ = (
    "SupportsParse",
    "parsable",
    "parse_primitive",
)
