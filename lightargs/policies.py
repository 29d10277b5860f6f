"""
Name comparison policies.

A parser picks one ComparisonPolicy at construction time and applies it
everywhere a name is compared or used as a table key:
- matching `--name` tokens in the argument vector,
- keying the definition and value tables,
- normalizing the names callers pass to lookups.

normalize() is the single place where case folding happens.
"""
from enum import Enum

MARKER = "--"
"""Prefix that marks a token as an argument name rather than a value."""


class ComparisonPolicy(Enum):
    """
    case-sensitivity rule for argument names.

    - CASE_SENSITIVE: names must match exactly (default).
    - CASE_INSENSITIVE: names match after case folding (`--VERBOSE` == `--verbose`).
    """
    CASE_SENSITIVE = "case-sensitive"
    CASE_INSENSITIVE = "case-insensitive"

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


def normalize(name, policy, /):
    """
    Return the lookup key for name under the given policy.

    CASE_INSENSITIVE uses str.casefold, which folds more than lowering does:
    `STRASSE` and `straße` normalize to the same key.
    """
    if not isinstance(name, str):
        raise TypeError("normalize() first argument must be a string")
    if not isinstance(policy, ComparisonPolicy):
        raise TypeError("normalize() second argument must be a comparison policy")
    if policy is ComparisonPolicy.CASE_INSENSITIVE:
        return name.casefold()
    return name


def tokenize(name, /):
    """
    Return the token form of an argument name (`help` -> `--help`).
    """
    return MARKER + name


def matches(token, name, policy, /):
    """
    Tell whether token is the marked form of name under the given policy.
    """
    return normalize(token, policy) == normalize(tokenize(name), policy)


__all__ = (
    "MARKER",
    "ComparisonPolicy",
    "normalize",
    "tokenize",
    "matches",
)
