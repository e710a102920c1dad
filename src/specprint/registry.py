"""Name-to-factory registries for decoders and spectral strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from .errors import InvalidArgumentError

T = TypeVar("T")


class RegistryError(InvalidArgumentError):
    """Raised for invalid registry operations."""


@dataclass
class Registry(Generic[T]):
    """Simple name-to-factory mapping."""

    kind: str
    _factories: dict[str, Callable[..., T]] = field(default_factory=dict)

    def register(
        self,
        name: str,
        factory: Callable[..., T],
        *,
        overwrite: bool = False,
    ) -> None:
        if not overwrite and name in self._factories:
            raise RegistryError(f"{self.kind.capitalize()} '{name}' is already registered.")
        self._factories[name] = factory

    def create(self, name: str, *args: object, **kwargs: object) -> T:
        if name not in self._factories:
            available = ", ".join(sorted(self._factories)) or "<none>"
            raise RegistryError(
                f"Unknown {self.kind} '{name}'. Available {self.kind}s: {available}"
            )
        return self._factories[name](*args, **kwargs)

    def available(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories
