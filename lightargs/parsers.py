"""
lightargs parser: resolve declared arguments against an argument vector.

What this module provides
- search(tokens, definition, policy): the value-search primitive. Finds the
  first `--<name>` token and decides the resolved value:
    • absent + required      → RequiredArgumentMissingError
    • absent + optional flag → "False"
    • absent + optional value argument → Unset (caller default on lookup)
    • present flag           → "True" (the next token is never consumed)
    • present value argument → the next token, or MissingValueForArgumentError
      when there is none or it is itself a `--` token
- ArgParser: resolves every definition once, at construction, then serves
  typed (parse_as) and raw (parse_as_string) lookups from its value table.
- parse(...): convenience constructor.

Construction order
1. validate every definition (Registry),
2. inject the default `--help` flag when the caller has none and resolve it,
3. when `--help` is present print the usage listing and call exit(0),
4. otherwise resolve the remaining definitions; the first fault aborts.

Quick start
    from lightargs import ArgumentDefinition, ArgParser

    parser = ArgParser([
        ArgumentDefinition("threads", "Worker count.", "--threads <N>"),
        ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True),
    ])
    threads = parser.parse_as("threads", int, 4)
    verbose = parser.parse_as("verbose", bool)

Collaborators
- stdout: rich Console receiving the help listing.
- stderr: rich Console receiving faults in shell mode.
- exit: called with 0 after help and, in shell mode, with 1 after a fault.
"""
import os.path
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .definitions import Registry
from .faults import *
from .policies import MARKER, ComparisonPolicy, matches, normalize, tokenize
from .primitives import parse_primitive
from .utils import *

TRUE = str(True)
FALSE = str(False)


def search(tokens, definition, policy=ComparisonPolicy.CASE_SENSITIVE, /):
    """
    Resolve a single definition against the argument vector.

    Only the first matching token counts; later duplicates are ignored.

    Returns
    - "True" / "False" for flags, the following token for value arguments, or
      Unset for an optional value argument that was not supplied.

    Raises
    - RequiredArgumentMissingError, MissingValueForArgumentError
    """
    for index, token in enumerate(tokens):
        if matches(token, definition.name, policy):
            break
    else:
        if definition.required:
            raise RequiredArgumentMissingError(
                f"required argument '{definition.token}' was not found",
                argument=definition.name,
                usage=definition.usage,
                hint=f"pass {definition.usage}",
            )
        return FALSE if definition.flag else Unset

    if definition.flag:
        return TRUE

    if index + 1 >= len(tokens) or tokens[index + 1].startswith(MARKER):
        raise MissingValueForArgumentError(
            f"non-flag argument '{definition.token}' is missing a value",
            argument=definition.name,
            usage=definition.usage,
            hint=f"follow it with a value: {definition.usage}",
        )
    return tokens[index + 1]


def _tokenize(args, /):
    """
    Normalize the argument vector into a tuple of strings.

    - Unset: the current process arguments (sys.argv[1:]).
    - str: shell-like string split with shlex.split.
    - Iterable[str]: used as-is.
    """
    if args is Unset:
        return tuple(sys.argv[1:])
    if isinstance(args, str):
        return tuple(shlex.split(args))
    if isinstance(args, Iterable):
        tokens = tuple(args)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("ArgParser() argument vector must contain only strings")
        return tokens
    raise TypeError("ArgParser() argument vector must be a string or an iterable of strings")


class ArgParser:
    """
    Eagerly resolved, read-only view over an argument vector.

    Parameters
    - definitions: Iterable[ArgumentDefinition]
      The catalogue of recognized arguments.
    - args: Unset | str | Iterable[str]
      The raw argument vector. Defaults to sys.argv[1:].
    - policy: ComparisonPolicy
      Case-sensitivity for names, in the vector and in lookups.
    - prog: Unset | str
      Program name used in fault headers and the fancy help title.
    - shell: bool
      Print faults to stderr and exit(1) instead of raising them.
    - colorful / fancy: bool
      Styling of help and faults (palette overridable via __main__.__styles__).
    - stdout / stderr: rich Console
      Destinations of the help listing and of shell-mode faults.
    - exit: Callable[[int], Any]
      Process termination, sys.exit by default.
    """

    def __init__(
            self,
            definitions,
            args=Unset,
            policy=ComparisonPolicy.CASE_SENSITIVE,
            /,
            *,
            prog=Unset,
            shell=False,
            colorful=False,
            fancy=False,
            stdout=Unset,
            stderr=Unset,
            exit=sys.exit,
    ):
        if not isinstance(policy, ComparisonPolicy):
            raise TypeError("ArgParser() policy must be a comparison policy")
        if not isinstance(prog, str | Unset):
            raise TypeError("ArgParser() 'prog' must be a string")
        if not callable(exit):
            raise TypeError("ArgParser() 'exit' must be callable")

        self._policy = policy
        self._prog = coalesce(prog, getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0])))
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._stdout = stdout if stdout is not Unset else Console()
        self._stderr = stderr if stderr is not Unset else Console(stderr=True)
        self._exit = exit
        self._tokens = _tokenize(args)
        self._definitions = {}
        self._values = {}

        try:
            self._resolve(definitions)
        except ParserException as fault:
            self.trigger(fault)

    policy = mirror("policy")
    prog = mirror("prog")
    tokens = mirror("tokens")

    @property
    def definitions(self):
        """
        Read-only definition table keyed by normalized name.
        """
        return MappingProxyType(self._definitions)

    @property
    def values(self):
        """
        Read-only value table keyed by normalized name.
        """
        return MappingProxyType(self._values)

    def _resolve(self, definitions):
        registry = Registry(definitions, self._policy)

        if registry.synthesized:
            # Help short-circuits everything else, so it is resolved first.
            self._store(registry.help)
            if self._values[registry.key(registry.help.name)] == TRUE:
                self._helper(registry.definitions)
                self._exit(0)
                return

        for definition in registry:
            if registry.key(definition.name) not in self._values:
                self._store(definition)

    def _store(self, definition):
        key = normalize(definition.name, self._policy)
        value = search(self._tokens, definition, self._policy)
        self._definitions[key] = definition
        self._values[key] = value

    def _helper(self, definitions):
        """
        Render the usage listing to the stdout console.

        Layout: a "Usage:" header, then one block per definition: the usage
        string (bracketed when optional), the description and a blank line.

        Palette keys
        - usage-label, required-usage, optional-usage, description, panel-title
        """
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "required-usage": "bold #22C55E",
            "optional-usage": "bold #FFD600",
            "description": "#9CA3AF",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        listing = Text.assemble(("Usage:", styler("usage-label")), "\n\n")
        for definition in definitions:
            if definition.required:
                listing.append(definition.usage, styler("required-usage"))
            else:
                listing.append(f"[{definition.usage}]", styler("optional-usage"))
            listing.append("\n")
            listing.append(definition.description, styler("description"))
            listing.append("\n\n")
        listing.rstrip()

        if self._fancy:
            self._stdout.print(Panel(
                listing,
                title=Text.assemble("[ ", f"{self._prog} help".upper(), " ]", style=styler("panel-title")),
                title_align="left",
            ))
        else:
            # blocks keep their lines whatever the console width
            self._stdout.print(listing, soft_wrap=True)
        self._stdout.print()

    def _lookup(self, name):
        if not isinstance(name, str):
            raise TypeError("argument name must be a string")
        if (key := normalize(name, self._policy)) not in self._values:
            self.trigger(UndefinedArgumentError(
                f"tried to parse undefined argument '{tokenize(name)}'",
                argument=name,
                hint="declare it with an argument definition first",
            ))
        return self._definitions[key], self._values[key]

    def parse_as(self, name, type, /, default=None):
        """
        Parse the value of argument name as type.

        Returns default when the argument is an optional value argument that
        was not supplied. Flags parse as bool.

        Raises
        - UndefinedArgumentError: name was never declared.
        - TypeParseError: the stored literal is not a valid type; carries the
          argument's usage string.
        - TypeError: type cannot be parsed from a string at all.
        """
        definition, value = self._lookup(name)
        if value is Unset:
            return default
        try:
            return parse_primitive(type, value)
        except ValueError:
            self.trigger(TypeParseError(
                f"argument '{definition.token}' failed to parse as {type.__name__}: {value!r}",
                argument=definition.name,
                usage=definition.usage,
                hint=f"usage: {definition.usage}",
            ))

    def parse_as_string(self, name, /, default=None):
        """
        Return the raw literal of argument name, or default when an optional
        value argument was not supplied.
        """
        _, value = self._lookup(name)
        return coalesce(value, default)

    def trigger(self, fault, /):
        """
        Surface fault with this parser's runtime options (raise, or print and
        exit in shell mode).
        """
        trigger(
            fault,
            prog=self._prog,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
            console=self._stderr,
            exit=self._exit,
        )

    def __contains__(self, name, /):
        return isinstance(name, str) and normalize(name, self._policy) in self._values

    def __repr__(self):
        return f"arg-parser(policy={self._policy!r}, values={self._values!r})"

    def __rich_repr__(self):
        yield "policy", self._policy
        yield "definitions", tuple(self._definitions.values())
        yield "values", dict(self._values)


def parse(definitions, args=Unset, policy=ComparisonPolicy.CASE_SENSITIVE, /, **options):
    """
    Build an ArgParser; options are forwarded as keyword arguments.

    Parameters
    - definitions: Iterable[ArgumentDefinition]
    - args: Unset (sys.argv[1:]) | str (split with shlex.split) | Iterable[str]
    - policy: ComparisonPolicy
    """
    return ArgParser(definitions, args, policy, **options)


__all__ = (
    "ArgParser",
    "search",
    "parse",
)
