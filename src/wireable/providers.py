"""Conventions for packaging groups of definitions.

A bundle is handed the container and registers whatever definitions and
delegates it needs. Bundles are applied with :meth:`Container.register`.
"""

from abc import ABC, abstractmethod
from typing import Any

from wireable.container import Container
from wireable.errors import InvalidArgumentError

__all__ = ["Bundle", "ServiceProvider"]


class Bundle(ABC):
    """A reusable group of definitions."""

    @abstractmethod
    def register(self, container: Container):
        """Add definitions to ``container``."""


class ServiceProvider(Bundle):
    """A bundle that refuses to register into anything but a :class:`Container`.

    Subclasses implement :meth:`register_services`; ``register`` checks the
    consumer with :meth:`provides` first.

    Example:
        >>> class MailProvider(ServiceProvider):
        ...     def register_services(self, container):
        ...         container.set("mailer", SmtpMailer, ctor_args={"host": ":smtp_host"})
        >>>
        >>> Container().register(MailProvider())
    """

    def provides(self, consumer: Any):
        if not isinstance(consumer, Container):
            raise InvalidArgumentError(f"{consumer!r} is not a Container")

    def register(self, container: Container):
        self.provides(container)
        self.register_services(container)

    def register_services(self, container: Container):
        pass
