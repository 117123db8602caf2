"""
Dependency injection container used by the bootstrap.

Every service is a singleton built by a factory on first resolve, or an
object handed in ready-made (config, test doubles).
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Type, TypeVar
import logging

from thalexa.core.exceptions import ServiceNotRegisteredError

log = logging.getLogger("ThalexaLogger")

T = TypeVar("T")

Factory = Callable[["DIContainer"], Any]


class DIContainer:
    """
    Service registry keyed by type.

    Resolution happens on the Qt main thread only, so nothing is locked.

    Example:
        container = DIContainer()
        container.register_singleton(IStateRepository, lambda c: JsonStateRepository(path))
        container.register_singleton(AppStore, lambda c: AppStore(c.resolve(IStateRepository)))

        store = container.resolve(AppStore)
    """

    def __init__(self):
        self._factories: Dict[Type, Factory] = {}
        self._instances: Dict[Type, Any] = {}

    def register_singleton(self, service_type: Type[T], factory: Factory) -> DIContainer:
        """
        Register a lazily created service.

        Args:
            service_type: Key the service is resolved by
            factory: Builds the service from the container

        Returns:
            Self for method chaining
        """
        self._factories[service_type] = factory
        self._instances.pop(service_type, None)
        return self

    def register_instance(self, service_type: Type[T], instance: T) -> DIContainer:
        """Register an already built object."""
        self._factories.pop(service_type, None)
        self._instances[service_type] = instance
        return self

    def resolve(self, service_type: Type[T]) -> T:
        """
        Return the service registered for a type, building it on first use.

        Raises:
            ServiceNotRegisteredError: If nothing is registered for the type
        """
        if service_type in self._instances:
            return self._instances[service_type]

        factory = self._factories.get(service_type)
        if factory is None:
            raise ServiceNotRegisteredError(service_type)

        log.debug(f"Creating {getattr(service_type, '__name__', service_type)}")
        instance = factory(self)
        self._instances[service_type] = instance
        return instance

    def dispose_all(self) -> None:
        """Call dispose/close on every built service and forget the built ones."""
        for instance in list(self._instances.values()):
            try:
                if hasattr(instance, "dispose"):
                    instance.dispose()
                elif hasattr(instance, "close"):
                    instance.close()
            except Exception as e:
                log.warning(f"Error disposing {type(instance).__name__}: {e}")

        # Factory-built services are rebuilt on the next resolve
        for service_type in self._factories:
            self._instances.pop(service_type, None)
