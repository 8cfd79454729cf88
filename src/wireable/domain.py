"""Domain models used throughout the container."""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

__all__ = [
    "MISSING",
    "DefinitionKind",
    "Definition",
    "Parameter",
    "Ref",
    "Param",
    "TypeRef",
    "Raw",
    "qualified_name",
]


class _Missing:
    """Sentinel for an absent value, distinct from ``None``."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class DefinitionKind(Enum):
    VALUE = "value"
    FACTORY = "factory"


@dataclass(frozen=True)
class Definition:
    """A registered recipe bound to an id.

    Attributes:
        id: The unique key of the definition.
        kind: Whether the definition holds a plain value or a factory.
        singleton: Whether the factory's first result is cached and reused.
        declared_types: Qualified names of the types this definition is indexed under.
        target: The plain value, or the factory callable.
    """

    id: str
    kind: DefinitionKind
    singleton: bool
    declared_types: tuple[str, ...]
    target: Any

    @property
    def is_factory(self) -> bool:
        return self.kind is DefinitionKind.FACTORY


@dataclass(frozen=True)
class Parameter:
    """Describes one declared parameter of an injection target.

    Attributes:
        name: The parameter name in the target's signature.
        kind: The :class:`inspect.Parameter` kind.
        declared_type: The annotated type with any ``Annotated`` metadata stripped,
            or None if the parameter is not annotated.
        qualifier: The first ``Annotated`` metadata string, naming the id that
            satisfies this parameter.
        has_default: Whether the target supplies a default value.
        unresolved_type: Name of the annotation that could not be evaluated, if any.
    """

    name: str
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    declared_type: Optional[Any] = None
    qualifier: Optional[str] = None
    has_default: bool = False
    unresolved_type: Optional[str] = None

    @property
    def is_variadic(self) -> bool:
        return self.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        )


@dataclass(frozen=True)
class Ref:
    """An argument resolved by looking up ``id`` in the container."""

    id: str


@dataclass(frozen=True)
class Param:
    """An argument resolved by looking up ``key`` in the parameter store."""

    key: str


@dataclass(frozen=True)
class TypeRef:
    """An argument resolved by type through the container's type index."""

    type: Union[type, str]


@dataclass(frozen=True)
class Raw:
    """An argument passed through as-is, even if it looks like a placeholder."""

    value: Any


def qualified_name(target: Union[type, str, Callable]) -> str:
    """Return the key under which ``target`` is held in the type index.

    Strings are taken to be qualified names already; a leading ``@`` type marker
    is stripped.

    Example:
        >>> qualified_name(OrderedDict)          # "collections.OrderedDict"
        >>> qualified_name("@myapp.db.Database") # "myapp.db.Database"
    """
    if isinstance(target, str):
        return target.lstrip("@")
    return f"{target.__module__}.{target.__qualname__}"
