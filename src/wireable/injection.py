"""Invocation of constructors, methods and functions with injected arguments."""

import functools
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Any, Callable, Optional, Union

from wireable.domain import qualified_name
from wireable.errors import DependencyResolutionError, InvalidArgumentError
from wireable.resolver import ArgumentResolver
from wireable.signatures import parameters_of

__all__ = ["Injector", "load_type"]

logger = logging.getLogger(__name__)


def load_type(target: Union[type, str]) -> type:
    """Return ``target`` itself, or the class named by a qualified name string.

    Raises:
        DependencyResolutionError: If the name cannot be imported.
        InvalidArgumentError: If the target is not a class.
    """
    if isinstance(target, str):
        name = qualified_name(target)
        try:
            target = pkgutil.resolve_name(name)
        except (ImportError, AttributeError, ValueError) as exc:
            raise DependencyResolutionError(name) from exc

    if not inspect.isclass(target):
        raise InvalidArgumentError(f"{target!r} is not a class")
    return target


class Injector:
    """Call targets with arguments produced by an :class:`ArgumentResolver`.

    Every entry point takes ``args``, a mapping of parameter names to raw
    arguments. Parameters missing from ``args`` are resolved by type where possible.
    """

    def __init__(self, resolver: ArgumentResolver):
        self._resolver = resolver

    def inject_constructor(
        self,
        cls: Union[type, str],
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Construct ``cls``, resolving the parameters of its ``__init__``.

        A class that does not define ``__init__`` anywhere in its hierarchy is
        constructed without arguments and ``args`` is ignored.
        """
        cls = load_type(cls)
        if cls.__init__ is object.__init__:
            return cls()

        parameters = parameters_of(cls.__init__, skip_first=True)
        resolved = self._resolver.resolve_arguments(parameters, args or {})
        logger.debug(
            "Constructing %s with %d injected arguments", qualified_name(cls), len(resolved)
        )
        return cls(*resolved.args, **resolved.kwargs)

    def inject_static_method(
        self,
        cls: Union[type, str],
        method_name: str,
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Call a static or class method of ``cls``."""
        cls = load_type(cls)
        return self._invoke(_method_of(cls, method_name), args)

    def inject_method(
        self,
        instance: Any,
        method_name: str,
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Call a method bound to ``instance``."""
        if instance is None or inspect.isclass(instance) or isinstance(instance, ModuleType):
            raise InvalidArgumentError(f"{instance!r} is not an object instance")
        return self._invoke(_method_of(instance, method_name), args)

    def inject_function(
        self,
        function: Union[Callable, str],
        args: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Call a free function, lambda or ``functools.partial``.

        ``function`` may also be the qualified name of an existing function, such
        as ``"myapp.factories.make_mailer"``.
        """
        return self._invoke(_function_of(function), args)

    def _invoke(self, target: Callable, args: Optional[dict[str, Any]]) -> Any:
        resolved = self._resolver.resolve_arguments(parameters_of(target), args or {})
        return target(*resolved.args, **resolved.kwargs)


def _method_of(owner: Any, method_name: str) -> Callable:
    method = getattr(owner, method_name, None)
    if method is None or not callable(method):
        raise InvalidArgumentError(f"{owner!r} has no method {method_name!r}")
    return method


def _function_of(function: Union[Callable, str]) -> Callable:
    if isinstance(function, str):
        try:
            resolved = pkgutil.resolve_name(function)
        except (ImportError, AttributeError, ValueError):
            resolved = None
        if not inspect.isroutine(resolved):
            raise InvalidArgumentError(f"{function!r} does not name an existing function")
        return resolved

    if not (inspect.isroutine(function) or isinstance(function, functools.partial)):
        raise InvalidArgumentError(f"{function!r} is not a function, lambda or partial")
    return function
