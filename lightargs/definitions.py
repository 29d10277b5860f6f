r"""
lightargs argument definitions and the definition registry.

Overview
- ArgumentDefinition: immutable description of one `--name` argument.
  • name: identifier matched as `--<name>` in the argument vector.
  • description / usage: human-readable help text (usage is shown verbatim).
  • flag: presence-only switch; never consumes the following token.
  • required: absence from the argument vector is a construction-time fault.

- validate(definition): shape check run over every caller definition before any
  value is resolved. An empty name, description or usage raises DefinitionError.
  Whitespace counts as text: only "" is empty.

- ensure_help(definitions): returns the definitions extended with the default
  `--help` flag unless one named "help" (in any casing) is already declared.

- Registry: validated, help-augmented catalogue keyed by normalized name.
  Two definitions whose names normalize to the same key are rejected with
  DefinitionError (DUPLICATED_DEFINITION) instead of the later one silently
  replacing the earlier; this is stricter than a last-wins table on purpose.

Quick example:
    >>> from lightargs import ArgumentDefinition, Registry
    >>> verbose = ArgumentDefinition("verbose", "Print more.", "--verbose", flag=True)
    >>> [definition.name for definition in Registry([verbose])]
    ['verbose', 'help']
"""
import functools
import operator
import re
from collections.abc import Iterable

from .faults import DefinitionError, FaultCode
from .policies import ComparisonPolicy, normalize, tokenize
from .utils import *


class DefinitionType(type):
    """
    Metaclass wiring read-only fields and stable representations.

    - Every name listed in __introspectable__ becomes a read-only property
      mirroring the private "_{name}" backing field.
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and reprs.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class ArgumentDefinition(metaclass=DefinitionType):
    """
    Declarative description of one recognized argument.

    Fields are stored exactly as given and not checked for emptiness here;
    validate() is what rejects an incomplete definition, so a whole catalogue
    can be declared before any of it is checked.
    """

    __introspectable__ = (
        "name",
        "description",
        "usage",
        "flag",
        "required",
    )

    def __init__(self, name, description, usage, *, flag=False, required=False):
        """
        Parameters
        - name: str
          Argument name without the `--` marker.
        - description: str
          Short explanation shown in the help listing.
        - usage: str
          Syntax shown in the help listing, e.g. "--output <PATH>".
        - flag: bool
          Presence-only switch resolving to True/False.
        - required: bool
          Construction fails when the argument is absent.
        """
        for field, object in (("name", name), ("description", description), ("usage", usage)):
            if not isinstance(object, str):
                raise TypeError(f"{type(self).__typename__} '{field}' must be a string")

        self._name = name
        self._description = description
        self._usage = usage
        self._flag = bool(flag)
        self._required = bool(required)

    def __eq__(self, other):
        if not isinstance(other, ArgumentDefinition):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash(tuple(self.__rich_repr__()))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**dict(self.__rich_repr__()) | overrides)

    @property
    def token(self):
        """
        The `--<name>` form matched in the argument vector.
        """
        return tokenize(self._name)


HELP = ArgumentDefinition("help", "Displays the help page.", "--help", flag=True)
"""Definition injected when the caller does not declare its own `help`."""


def validate(definition, /):
    """
    Check the shape of a single definition.

    Raises
    - TypeError: definition is not an ArgumentDefinition.
    - DefinitionError: name, description or usage is empty.
    """
    if not isinstance(definition, ArgumentDefinition):
        raise TypeError("validate() argument must be an argument definition")

    if not definition.name:
        raise DefinitionError(
            "an argument definition is missing a name",
            hint="give every definition a non-empty name",
        )
    if not definition.description:
        raise DefinitionError(
            f"argument '{definition.token}' is missing a description",
            argument=definition.name,
            hint="describe what the argument does in a short sentence",
        )
    if not definition.usage:
        raise DefinitionError(
            f"argument '{definition.token}' is missing a usage string",
            argument=definition.name,
            hint=f"show its syntax, e.g. '{definition.token}{'' if definition.flag else ' <VALUE>'}'",
        )
    return definition


def ensure_help(definitions, /):
    """
    Return definitions as a tuple, extended with HELP when no definition is
    named "help". The lookup ignores case whatever policy the parser uses.
    """
    definitions = tuple(definitions)
    for definition in definitions:
        if normalize(definition.name, ComparisonPolicy.CASE_INSENSITIVE) == HELP.name:
            return definitions
    return definitions + (HELP,)


class Registry:
    """
    Validated catalogue of argument definitions.

    Construction
    - validates every caller definition (first failure aborts),
    - rejects two definitions sharing a normalized name,
    - appends the default help definition when the caller has none.

    Iteration yields definitions in declaration order (a synthesized help comes
    last); indexing and membership use names normalized under the policy.
    """

    def __init__(self, definitions, policy=ComparisonPolicy.CASE_SENSITIVE, /):
        if not isinstance(definitions, Iterable) or isinstance(definitions, str | ArgumentDefinition):
            raise TypeError("Registry() first argument must be an iterable of argument definitions")
        if not isinstance(policy, ComparisonPolicy):
            raise TypeError("Registry() second argument must be a comparison policy")

        declared = tuple(map(validate, definitions))

        self._policy = policy
        self._definitions = ensure_help(declared)
        self._synthesized = len(self._definitions) > len(declared)
        self._table = {}

        for definition in self._definitions:
            if (key := normalize(definition.name, policy)) in self._table:
                raise DefinitionError(
                    f"argument '{definition.token}' is defined more than once",
                    code=FaultCode.DUPLICATED_DEFINITION,
                    title="duplicated definition",
                    argument=definition.name,
                    hint="remove or rename one of the definitions",
                )
            self._table[key] = definition

        # ensure_help() guarantees one definition named "help" in some casing
        self._help = next(
            definition for definition in self._definitions
            if normalize(definition.name, ComparisonPolicy.CASE_INSENSITIVE) == HELP.name
        )

    policy = mirror("policy")
    definitions = mirror("definitions")
    synthesized = mirror("synthesized")
    help = mirror("help")

    def key(self, name, /):
        """
        Normalize name under this registry's policy.
        """
        return normalize(name, self._policy)

    def __getitem__(self, name, /):
        return self._table[self.key(name)]

    def __contains__(self, name, /):
        return isinstance(name, str) and self.key(name) in self._table

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self):
        return len(self._definitions)

    def __repr__(self):
        return f"registry(policy={self._policy!r}, definitions={self._definitions!r})"


__all__ = (
    "ArgumentDefinition",
    "HELP",
    "Registry",
    "validate",
    "ensure_help",
)

# Remove the internal metaclass from the module namespace; not part of the public API.
del DefinitionType
