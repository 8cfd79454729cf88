"""
The dependency-injection container.

A :class:`Container` maps string ids to definitions: plain values, factory
functions, or classes built by constructor injection. Factory definitions are
singletons by default, so the first result is cached and returned by every later
``get``. Definitions are also indexed by type, so that a parameter annotated with
a class can be satisfied by the single definition of that class.

Ids beginning with a delegated prefix are looked up in another container.

Example:
    >>> container = Container()
    >>> container.set_parameters({"smtp_host": "localhost"})
    >>> container.set("mailer", SmtpMailer, declared_type=Mailer, ctor_args={"host": ":smtp_host"})
    >>> container.set("clock", Clock())
    >>> container.set("signup", SignupService)
    >>> container.get("signup").mailer is container.get("mailer")
    True
"""

import functools
import inspect
import logging
from collections import defaultdict
from typing import (
    Any,
    Callable,
    Mapping,
    Optional,
    Protocol,
    Union,
    get_type_hints,
    runtime_checkable,
)

from wireable.config import ContainerConfig
from wireable.domain import MISSING, Definition, DefinitionKind, qualified_name
from wireable.errors import (
    DependencyResolutionError,
    DuplicateDefinitionError,
    InvalidArgumentError,
    NotFoundError,
)
from wireable.injection import Injector, load_type
from wireable.parameters import ParameterStore
from wireable.resolver import ArgumentResolver, is_injectable_type
from wireable.signatures import parameters_of

__all__ = ["Container", "ContainerLike", "ContainerKey", "inferred_id"]

logger = logging.getLogger(__name__)

ContainerKey = Union[str, type]
"""Key for ``container[key]``: an id, or a type resolved through the type index."""


@runtime_checkable
class ContainerLike(Protocol):
    """Anything a container can delegate lookups to."""

    def has(self, id: str) -> bool: ...

    def get(self, id: str) -> Any: ...


def inferred_id(target: Any) -> str:
    """Derive a definition id from a class or function name.

    Example:
        >>> inferred_id(SmtpMailer)   # Returns "SmtpMailer"
        >>> inferred_id(make_mailer)  # Returns "mailer"
    """
    name = target.__name__
    if not inspect.isclass(target) and name.startswith("make_"):
        return name[5:]
    return name


class Container:
    """Registry of definitions with injection of constructors, methods and functions."""

    def __init__(self, config: Optional[ContainerConfig] = None):
        self.config = config or ContainerConfig()
        self._definitions: dict[str, Definition] = {}
        self._instances: dict[str, Any] = {}
        self._types: dict[str, list[str]] = defaultdict(list)
        self._delegates: dict[str, ContainerLike] = {}
        self._parameters = ParameterStore()
        self._injector = Injector(ArgumentResolver(self))

        self.set(self.config.self_id, self)

    def set_parameters(self, parameters: Mapping[str, Any]) -> "Container":
        """Install the parameter store. Only the first call has any effect."""
        if not self._parameters.install(parameters):
            logger.debug("Parameters already installed, ignoring %d new values", len(parameters))
        return self

    def get_parameter(self, key: str) -> Any:
        """Return the parameter stored under ``key``, or ``MISSING``."""
        return self._parameters.get(key)

    def set(
        self,
        id: str,
        definition: Any,
        singleton: bool = True,
        declared_type: Union[type, str, None] = None,
        ctor_args: Optional[dict[str, Any]] = None,
    ) -> "Container":
        """Register a definition under ``id``.

        Args:
            id: The unique key of the definition.
            definition: A class, which is built by constructor injection; a function,
                lambda or partial, which is called to produce the value; or any other
                object, which is the value itself.
            singleton: Whether a factory's first result is cached.
            declared_type: A type (or qualified type name) to index the definition
                under, in addition to the class hierarchy of a plain value.
            ctor_args: Raw constructor arguments used when ``definition`` is a class.

        Returns:
            The container, so that calls can be chained.

        Raises:
            DuplicateDefinitionError: If ``id`` is already defined.
        """
        if id in self._definitions:
            raise DuplicateDefinitionError(id)

        if inspect.isclass(definition):
            kind = DefinitionKind.FACTORY
            target = functools.partial(self.inject_constructor, definition, ctor_args or {})
            declared_types = []
        elif _is_factory(definition):
            kind, target, declared_types = DefinitionKind.FACTORY, definition, []
        else:
            kind, target = DefinitionKind.VALUE, definition
            declared_types = [
                qualified_name(t) for t in type(definition).__mro__ if t is not object
            ]

        if declared_type is not None:
            declared_types.append(qualified_name(declared_type))

        self._definitions[id] = Definition(id, kind, singleton, tuple(declared_types), target)
        for type_name in dict.fromkeys(declared_types):
            self._types[type_name].append(id)

        logger.debug("Defined %r as %s (types: %s)", id, kind.value, declared_types)
        return self

    def provides(
        self,
        id: Optional[str] = None,
        singleton: bool = True,
        declared_type: Union[type, str, None] = None,
        ctor_args: Optional[dict[str, Any]] = None,
    ) -> Callable:
        """Decorator to register a class or factory function.

        Args:
            id: Optional id to assign; defaults to the class name, or the function
                name with any 'make_' prefix removed.
            singleton: Whether the first result is cached.
            declared_type: Type to index the definition under. For functions this
                defaults to the annotated return type.
            ctor_args: Raw constructor arguments, for classes.

        Example:
            @container.provides(declared_type=Mailer)
            def make_mailer(host: Annotated[str, "smtp_host"]) -> SmtpMailer:
                return SmtpMailer(host)
        """

        def decorator(obj):
            if not (inspect.isclass(obj) or inspect.isfunction(obj)):
                raise InvalidArgumentError(f"{obj!r} is not a class or function")

            indexed_type = declared_type
            if indexed_type is None:
                indexed_type = obj if inspect.isclass(obj) else _return_type(obj)

            self.set(id or inferred_id(obj), obj, singleton, indexed_type, ctor_args)
            return obj

        return decorator

    def get(self, id: str) -> Any:
        """Resolve the value defined under ``id``.

        Raises:
            NotFoundError: If nothing is defined under ``id``.
        """
        delegate = self._delegate_for(id)
        if delegate is not None:
            return delegate.get(id)

        definition = self._definitions.get(id)
        if definition is None:
            raise NotFoundError(id)

        if not definition.is_factory:
            return definition.target

        if definition.singleton and id in self._instances:
            return self._instances[id]

        value = self.inject_function(definition.target, self._implicit_args(definition.target))
        if definition.singleton:
            logger.debug("Caching singleton %r", id)
            self._instances[id] = value
        return value

    def has(self, id: str) -> bool:
        delegate = self._delegate_for(id)
        if delegate is not None:
            return delegate.has(id)
        return id in self._definitions

    def find(self, prefix: str) -> dict[str, Any]:
        """Resolve every locally defined id that starts with ``prefix``."""
        return {id: self.get(id) for id in list(self._definitions) if id.startswith(prefix)}

    def delegate(self, prefix: str, container: ContainerLike) -> "Container":
        """Forward lookups of ids starting with ``prefix`` to ``container``."""
        if not isinstance(container, ContainerLike):
            raise InvalidArgumentError(f"{container!r} does not provide has() and get()")
        self._delegates[prefix] = container
        logger.debug("Delegating %r to %r", prefix, container)
        return self

    def resolve_type(self, type_: Union[type, str]) -> Any:
        """Resolve the single definition indexed under a type.

        With deep type resolution enabled, a type without exactly one definition is
        constructed directly instead.

        Raises:
            DependencyResolutionError: If the type cannot be resolved. When deep
                construction fails on a nested dependency, the error names that
                dependency's type.
        """
        type_name = qualified_name(type_)
        candidates = self._types.get(type_name, [])
        if len(candidates) == 1:
            return self.get(candidates[0])

        if not self.config.deep_type_resolution:
            raise DependencyResolutionError(type_name)

        logger.debug("Deep resolution of %s (%d candidates)", type_name, len(candidates))
        try:
            cls = load_type(type_)
        except InvalidArgumentError as exc:
            raise DependencyResolutionError(type_name) from exc
        if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
            raise DependencyResolutionError(type_name)
        _require_injectable_constructor(cls)
        return self.inject_constructor(cls)

    def register(self, provider: Any) -> "Container":
        """Let a provider populate the container.

        ``provider`` is an object with a ``register(container)`` method, such as a
        :class:`wireable.providers.Bundle`, or a plain callable taking the container.
        """
        if hasattr(provider, "register"):
            provider.register(self)
        elif callable(provider):
            provider(self)
        else:
            raise InvalidArgumentError(f"{provider!r} cannot register definitions")
        return self

    def inject_constructor(
        self,
        cls: Union[type, str],
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self._injector.inject_constructor(cls, args)

    def inject_static_method(
        self,
        cls: Union[type, str],
        method_name: str,
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self._injector.inject_static_method(cls, method_name, args)

    def inject_method(
        self,
        instance: Any,
        method_name: str,
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self._injector.inject_method(instance, method_name, args)

    def inject_function(
        self,
        function: Union[Callable, str],
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self._injector.inject_function(function, args)

    def __getitem__(self, key: ContainerKey) -> Any:
        if isinstance(key, str):
            return self.get(key)
        return self.resolve_type(key)

    def __contains__(self, id: str) -> bool:
        return self.has(id)

    def _delegate_for(self, id: str) -> Optional[ContainerLike]:
        return next(
            (container for prefix, container in self._delegates.items() if id.startswith(prefix)),
            None,
        )

    def _implicit_args(self, factory: Callable) -> dict[str, Any]:
        """Hand the container to a factory's first parameter if it is bare and required."""
        parameters = [p for p in parameters_of(factory) if not p.is_variadic]
        if not parameters:
            return {}
        first = parameters[0]
        if first.declared_type is None and first.unresolved_type is None and not first.has_default:
            return {first.name: self}
        return {}


def _require_injectable_constructor(cls: type):
    """Refuse a class whose required constructor parameters cannot be injected.

    Raises:
        DependencyResolutionError: Naming the parameter's type, or ``cls`` itself
            when the parameter is not annotated.
    """
    if cls.__init__ is object.__init__:
        return

    for parameter in parameters_of(cls.__init__, skip_first=True):
        if parameter.is_variadic or parameter.has_default or parameter.qualifier is not None:
            continue
        if parameter.unresolved_type is not None:
            raise DependencyResolutionError(parameter.unresolved_type)
        if is_injectable_type(parameter.declared_type):
            continue
        if parameter.declared_type is None:
            raise DependencyResolutionError(qualified_name(cls))
        if inspect.isclass(parameter.declared_type):
            raise DependencyResolutionError(qualified_name(parameter.declared_type))
        raise DependencyResolutionError(str(parameter.declared_type))


def _is_factory(definition: Any) -> bool:
    return inspect.isroutine(definition) or isinstance(definition, functools.partial)


def _return_type(func: Callable) -> Optional[type]:
    try:
        return_type = get_type_hints(func).get("return", None)
    except NameError:
        return None
    return return_type if inspect.isclass(return_type) else None
