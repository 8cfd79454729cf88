"""
Resolution of call arguments for injection targets.

The resolver matches a target's declared parameters against caller-supplied raw
arguments by name. Raw arguments may contain placeholders, which are replaced by
values from the container:

    "%mailer"            the definition registered under "mailer"
    ":smtp_host"         the parameter "smtp_host"
    "@myapp.mail.Mailer" the unique definition of type myapp.mail.Mailer

A placeholder that cannot be resolved is passed through as the literal string.
The tagged forms :class:`Ref`, :class:`Param` and :class:`TypeRef` say the same
thing without relying on string prefixes, and fail loudly instead. :class:`Raw`
protects a string that merely looks like a placeholder.

Parameters with no supplied argument are resolved by type, and omitted when
they have no injectable type so that the target's own defaults apply.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wireable.domain import MISSING, Param, Parameter, Raw, Ref, TypeRef
from wireable.errors import DependencyResolutionError, NotFoundError

if TYPE_CHECKING:
    from wireable.container import Container

__all__ = ["ArgumentResolver", "ResolvedArguments", "is_injectable_type"]

logger = logging.getLogger(__name__)

CONTAINER_MARKER = "%"
PARAMETER_MARKER = ":"
TYPE_MARKER = "@"

_NON_INJECTABLE_MODULES = frozenset({"builtins", "typing"})


@dataclass
class ResolvedArguments:
    """Arguments ready to be applied to a target as ``target(*args, **kwargs)``."""

    args: list[Any] = field(default_factory=list)
    kwargs: dict[str, Any] = field(default_factory=dict)

    def add(self, parameter: Parameter, value: Any):
        if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
            self.args.append(value)
        else:
            self.kwargs[parameter.name] = value

    def __len__(self) -> int:
        return len(self.args) + len(self.kwargs)


def is_injectable_type(declared_type: Any) -> bool:
    """True if a parameter of this type can be satisfied from the type index.

    Builtin scalars and containers, and typing constructs such as ``Optional[X]``,
    are never injected by type.
    """
    return (
        inspect.isclass(declared_type)
        and declared_type.__module__ not in _NON_INJECTABLE_MODULES
    )


class ArgumentResolver:
    """Produce the call arguments for a target from raw arguments and the container."""

    def __init__(self, container: "Container"):
        self._container = container

    def resolve_arguments(
        self, parameters: list[Parameter], raw_args: dict[str, Any]
    ) -> ResolvedArguments:
        """Resolve one argument per parameter that can be satisfied.

        Args:
            parameters: The target's parameter descriptors, in declaration order.
            raw_args: Caller-supplied arguments keyed by parameter name.

        Returns:
            The resolved positional and keyword arguments.

        Raises:
            DependencyResolutionError: If a parameter with no supplied argument has
                an injectable type that cannot be resolved, or an annotation that
                could not be evaluated.
        """
        resolved = ResolvedArguments()

        for parameter in parameters:
            if parameter.is_variadic:
                continue
            if parameter.name in raw_args:
                resolved.add(parameter, self.resolve_argument(raw_args[parameter.name]))
            elif parameter.qualifier is not None:
                resolved.add(parameter, self._container.get(parameter.qualifier))
            elif is_injectable_type(parameter.declared_type):
                resolved.add(parameter, self._container.resolve_type(parameter.declared_type))
            elif parameter.unresolved_type is not None and not parameter.has_default:
                raise DependencyResolutionError(parameter.unresolved_type)

        return resolved

    def resolve_argument(self, raw: Any) -> Any:
        """Resolve a single raw argument, recursing into lists, tuples and dicts."""
        if isinstance(raw, list):
            return [self.resolve_argument(item) for item in raw]
        if isinstance(raw, tuple):
            return tuple(self.resolve_argument(item) for item in raw)
        if isinstance(raw, dict):
            return {key: self.resolve_argument(value) for key, value in raw.items()}
        if isinstance(raw, str):
            return self._resolve_placeholder(raw)
        if isinstance(raw, Ref):
            return self._container.get(raw.id)
        if isinstance(raw, Param):
            value = self._container.get_parameter(raw.key)
            if value is MISSING:
                raise NotFoundError(raw.key)
            return value
        if isinstance(raw, TypeRef):
            return self._container.resolve_type(raw.type)
        if isinstance(raw, Raw):
            return raw.value
        return raw

    def _resolve_placeholder(self, raw: str) -> Any:
        if raw.startswith(CONTAINER_MARKER):
            try:
                return self._container.get(raw[1:])
            except NotFoundError as exc:
                if exc.id != raw[1:]:
                    raise
                logger.debug("No definition for placeholder %r, passing it through", raw)
                return raw

        if raw.startswith(PARAMETER_MARKER):
            value = self._container.get_parameter(raw[1:])
            if value is MISSING:
                logger.debug("No parameter for placeholder %r, passing it through", raw)
                return raw
            return value

        if raw.startswith(TYPE_MARKER):
            try:
                return self._container.resolve_type(raw)
            except DependencyResolutionError:
                logger.debug("Could not resolve type placeholder %r, passing it through", raw)
                return raw

        return raw
