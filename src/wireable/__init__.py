"""wireable dependency injection container.

wireable maps string ids to lazily built values and calls constructors, methods
and functions with their missing arguments filled in from the container.
Arguments are matched to parameters by name, may carry placeholders referring to
definitions or parameters, and are otherwise resolved by the parameter's type.

Key Features:
    - Plain value, factory and class definitions, singleton by default
    - Placeholders: "%id" for definitions, ":name" for parameters, "@pkg.Type" for types
    - Type-based resolution, failing on ambiguity rather than guessing
    - Optional deep type resolution of unregistered classes
    - Prefix-based delegation of lookups to other containers

Basic Usage:
    >>> from wireable import Container
    >>>
    >>> container = Container()
    >>> container.set_parameters({"dsn": "sqlite://"})
    >>> container.set("db", Database, ctor_args={"dsn": ":dsn"})
    >>> container.inject_function(lambda db: db.query("select 1"), {"db": "%db"})

The package consists of several modules:
    - container: The container, its type index and delegation
    - injection: Constructor, method and function injection
    - resolver: Argument and placeholder resolution
    - signatures: Parameter introspection
    - providers: Bundle conventions for grouping definitions
    - errors: Framework-specific exceptions
"""

from wireable.config import ContainerConfig
from wireable.container import Container, ContainerLike
from wireable.domain import MISSING, Param, Raw, Ref, TypeRef
from wireable.errors import (
    ContainerError,
    DependencyResolutionError,
    DuplicateDefinitionError,
    InvalidArgumentError,
    NotFoundError,
)
from wireable.providers import Bundle, ServiceProvider

__all__ = [
    "Bundle",
    "Container",
    "ContainerConfig",
    "ContainerError",
    "ContainerLike",
    "DependencyResolutionError",
    "DuplicateDefinitionError",
    "InvalidArgumentError",
    "MISSING",
    "NotFoundError",
    "Param",
    "Raw",
    "Ref",
    "ServiceProvider",
    "TypeRef",
]
