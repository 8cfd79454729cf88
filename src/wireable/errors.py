"""Exceptions raised by the container and the injection layer."""

__all__ = [
    "ContainerError",
    "NotFoundError",
    "DuplicateDefinitionError",
    "DependencyResolutionError",
    "InvalidArgumentError",
]


class ContainerError(Exception):
    """Base class for every error raised by wireable."""

    pass


class NotFoundError(ContainerError):
    """Raised when no definition exists for an id and no delegate claims it."""

    def __init__(self, id: str):
        self.id = id
        super().__init__(f'No definition found for "{id}"')


class DuplicateDefinitionError(ContainerError):
    """Raised when an id is defined a second time."""

    def __init__(self, id: str):
        self.id = id
        super().__init__(f'Duplicate definition for "{id}"')


class DependencyResolutionError(ContainerError):
    """Raised when a dependency cannot be resolved by its type.

    Attributes:
        type_name: Qualified name of the type that could not be resolved. When the
            failure happened while constructing a nested dependency, this names the
            nested type rather than the one originally requested.
    """

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f'Failed to resolve dependency "{type_name}"')


class InvalidArgumentError(ContainerError):
    """Raised when an injection target is of the wrong kind."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(description)
