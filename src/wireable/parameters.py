"""Set-once store for the values behind ``:name`` placeholders."""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from wireable.domain import MISSING

__all__ = ["ParameterStore"]


class ParameterStore:
    """A flat mapping that can be installed exactly once and is read-only afterwards."""

    def __init__(self):
        self._parameters: Optional[Mapping[str, Any]] = None

    @property
    def installed(self) -> bool:
        return self._parameters is not None

    def install(self, parameters: Mapping[str, Any]) -> bool:
        """Install ``parameters`` unless a mapping is already installed.

        Returns:
            True if the mapping was installed, False if the call was ignored.
        """
        if self.installed:
            return False
        self._parameters = MappingProxyType(dict(parameters))
        return True

    def get(self, key: str) -> Any:
        if self._parameters is None:
            return MISSING
        return self._parameters.get(key, MISSING)

    def __contains__(self, key: str) -> bool:
        return self._parameters is not None and key in self._parameters
