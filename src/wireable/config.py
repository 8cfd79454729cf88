"""Container configuration."""

from dataclasses import dataclass

__all__ = ["ContainerConfig", "DEFAULT_SELF_ID"]

DEFAULT_SELF_ID = "DI"


@dataclass(frozen=True)
class ContainerConfig:
    """Options fixed for the lifetime of a container.

    Attributes:
        self_id: The id under which the container registers itself.
        deep_type_resolution: When enabled, a type with no unique registered
            definition is constructed directly instead of failing.
    """

    self_id: str = DEFAULT_SELF_ID
    deep_type_resolution: bool = False
