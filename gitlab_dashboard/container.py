"""
Dependency registry.

Maps component names to factories with an explicit, ordered list of
dependency names. Entries may be singletons, in which case the factory runs
at most once per registry.

Usage:
    container = Container()
    container.register("Settings", get_settings, singleton=True)
    container.register("UserService", UserService, dependencies=["HttpClient", "Settings"], singleton=True)
    container.freeze()

    service = container.resolve("UserService")
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigurationError, ResolutionError
from .logging import get_logger

logger = get_logger("container")


@dataclass(frozen=True)
class RegistryEntry:
    """A registered component."""

    name: str
    factory: Callable[..., Any]
    dependencies: tuple[str, ...] = ()
    singleton: bool = False


class Container:
    """Name-based factory registry with singleton caching and cycle detection."""

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        self._instances: dict[str, Any] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def register(
        self,
        name: str,
        factory: Callable[..., Any],
        dependencies: Sequence[str] = (),
        singleton: bool = False,
    ) -> None:
        """
        Register a component factory.

        Args:
            name: Unique component name
            factory: Callable invoked with the resolved dependencies, in order
            dependencies: Names of the components passed to the factory
            singleton: Construct once and reuse the instance

        Raises:
            ConfigurationError: If the registry is frozen, the name is taken,
                or the factory is not callable
        """
        if self._frozen:
            raise ConfigurationError(f"Registry is frozen, cannot register '{name}'")
        if name in self._entries:
            raise ConfigurationError(f"'{name}' is already registered")
        if not callable(factory):
            raise ConfigurationError(f"Factory for '{name}' is not callable")

        self._entries[name] = RegistryEntry(
            name=name,
            factory=factory,
            dependencies=tuple(dependencies),
            singleton=singleton,
        )
        logger.debug("component_registered", name=name, singleton=singleton)

    def freeze(self) -> "Container":
        """Reject any further registration."""
        self._frozen = True
        return self

    def resolve(self, name: str) -> Any:
        """
        Resolve a component by name.

        Raises:
            ResolutionError: If a name is unregistered or the dependency
                graph contains a cycle
        """
        return self._resolve(name, [])

    def _resolve(self, name: str, in_progress: list[str]) -> Any:
        if name in self._instances:
            return self._instances[name]

        entry = self._entries.get(name)
        if entry is None:
            if in_progress:
                raise ResolutionError(f"'{name}' is not registered (required by '{in_progress[-1]}')")
            raise ResolutionError(f"'{name}' is not registered")

        if name in in_progress:
            cycle = " -> ".join([*in_progress[in_progress.index(name):], name])
            raise ResolutionError(f"Dependency cycle detected: {cycle}")

        in_progress.append(name)
        try:
            args = [self._resolve(dependency, in_progress) for dependency in entry.dependencies]
        finally:
            in_progress.pop()

        instance = entry.factory(*args)
        if entry.singleton:
            self._instances[name] = instance
        return instance

    def instances(self) -> Iterator[tuple[str, Any]]:
        """Iterate over singleton instances constructed so far."""
        return iter(list(self._instances.items()))


__all__ = ["Container", "RegistryEntry"]
