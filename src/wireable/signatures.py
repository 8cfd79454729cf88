"""Introspection of injection targets into :class:`Parameter` descriptors."""

import functools
import inspect
import logging
from types import SimpleNamespace
from typing import Annotated, Any, Callable, get_args, get_origin, get_type_hints

from wireable.domain import Parameter
from wireable.errors import InvalidArgumentError

__all__ = ["parameters_of"]

logger = logging.getLogger(__name__)


def parameters_of(target: Callable, skip_first: bool = False) -> list[Parameter]:
    """Describe the declared parameters of a callable.

    Annotations are evaluated with :func:`typing.get_type_hints`. If an annotation
    names a type that cannot be found, the affected parameter is still described,
    with ``unresolved_type`` set, so that the failure only surfaces if the resolver
    actually needs that parameter's type.

    Args:
        target: The function, method or ``functools.partial`` to inspect.
        skip_first: Drop the first parameter (``self`` of an unbound ``__init__``).

    Returns:
        Parameter descriptors in declaration order.

    Raises:
        InvalidArgumentError: If the target has no introspectable signature.

    Example:
        >>> def service(untyped, db: Database, cache: Annotated[Cache, "redis"]): ...
        >>> parameters_of(service)
        >>> # [Parameter("untyped"),
        >>> #  Parameter("db", declared_type=Database),
        >>> #  Parameter("cache", declared_type=Cache, qualifier="redis")]
    """
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Cannot inspect parameters of {target!r}") from exc

    hints, unresolved = _type_hints(target)
    declared = list(signature.parameters.values())
    if skip_first:
        declared = declared[1:]

    return [
        _make_parameter(param, hints.get(param.name), unresolved.get(param.name))
        for param in declared
    ]


def _make_parameter(param: inspect.Parameter, annotation: Any, unresolved_type) -> Parameter:
    declared_type, qualifier = None, None
    if get_origin(annotation) is Annotated:
        declared_type, *metadata = get_args(annotation)
        qualifier = next((m for m in metadata if isinstance(m, str)), None)
    elif annotation is not None:
        declared_type = annotation

    return Parameter(
        param.name,
        param.kind,
        declared_type,
        qualifier,
        param.default is not inspect.Parameter.empty,
        unresolved_type,
    )


def _type_hints(target: Callable) -> tuple[dict[str, Any], dict[str, str]]:
    """Evaluate annotations, returning the hints and the names of any that failed."""
    while isinstance(target, functools.partial):
        target = target.func

    try:
        return get_type_hints(target, include_extras=True), {}
    except (NameError, AttributeError):
        logger.debug("Falling back to per-parameter annotation evaluation for %r", target)
    except TypeError:
        logger.debug("%r carries no evaluable annotations, ignoring them", target)
        return {}, {}

    hints: dict[str, Any] = {}
    unresolved: dict[str, str] = {}
    namespace = getattr(inspect.unwrap(target), "__globals__", {})
    for name, annotation in getattr(target, "__annotations__", {}).items():
        if not isinstance(annotation, str):
            hints[name] = annotation
            continue
        holder = SimpleNamespace(__annotations__={name: annotation})
        try:
            hints[name] = get_type_hints(holder, globalns=namespace, include_extras=True)[name]
        except NameError as exc:
            unresolved[name] = getattr(exc, "name", None) or annotation
        except AttributeError:
            unresolved[name] = annotation
    return hints, unresolved
