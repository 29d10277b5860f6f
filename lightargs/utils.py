"""
Helpers shared by the registry and the parser.

- Unset: marks an optional value argument that was not on the command line,
  so the caller's default can be used at lookup time.
- coalesce: turns Unset into a default.
- rename: names the callables generated by mirror() and the definition
  metaclass.
- mirror: read-only property over a private "_name" field.
"""
import builtins
import functools
from collections.abc import Sequence
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker. Falsy, single instance, cannot be subclassed.
    """

    def __ror__(self, other, /):
        # lets `str | Unset` be used in isinstance() checks
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    object, or default when object is Unset. Other falsy values pass through.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    rename(callable, name) sets __name__ and __qualname__ and returns callable;
    rename(name) returns a decorator doing the same.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    # the only containers behind mirrors are token and definition sequences
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_freeze, object))
    return object


def mirror(name, /):
    """
    Read-only property returning self._<name>; sequences come back as tuples.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
