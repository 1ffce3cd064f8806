"""Dependency injection container."""

import inspect
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import IMovieBackend

T = TypeVar("T")


class Container:
    """Dependency injection container using registry pattern.

    Services are wired by constructor annotations: a parameter annotated
    with ``Config`` receives the loaded configuration, and a parameter
    annotated with a registered type receives that service.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        """Initialize container.

        Args:
            config_manager: Configuration manager instance. If None, creates default.
        """
        self._services: Dict[Type, Type] = {}
        self._singletons: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Register a class built once on first use.

        Args:
            interface: Key type.
            implementation: Implementation class.
        """
        self._services[interface] = implementation
        self._logger.debug(
            f"Registered singleton: {interface.__name__} -> {implementation.__name__}"
        )

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Register a ready-made instance, e.g. a fake backend in tests.

        Args:
            interface: Key type.
            instance: Instance to return.
        """
        self._singletons[interface] = instance
        self._logger.debug(f"Registered instance: {interface.__name__}")

    def is_registered(self, interface: Type) -> bool:
        """Whether ``interface`` can be resolved."""
        return interface in self._singletons or interface in self._services

    def get(self, interface: Type[T]) -> T:
        """Resolve a service.

        Args:
            interface: Key type.

        Returns:
            Service instance.

        Raises:
            ValueError: If the service is not registered.
        """
        if interface in self._singletons:
            return self._singletons[interface]  # type: ignore

        if interface in self._services:
            instance = self._build(self._services[interface])
            self._singletons[interface] = instance
            return instance  # type: ignore

        raise ValueError(f"Service not registered: {interface.__name__}")

    def get_config(self) -> Config:
        """Get configuration instance."""
        return self._config_manager.get_config()

    def _build(self, implementation: Type[T]) -> T:
        """Instantiate ``implementation`` with its annotated dependencies.

        Raises:
            ValueError: If a required parameter cannot be resolved.
        """
        kwargs: Dict[str, Any] = {}
        signature = inspect.signature(implementation.__init__)

        for name, param in signature.parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            if param.annotation is Config:
                kwargs[name] = self.get_config()
            elif self.is_registered(param.annotation):
                kwargs[name] = self.get(param.annotation)
            elif param.default is inspect.Parameter.empty:
                raise ValueError(
                    f"Cannot resolve dependency {name!r} of {implementation.__name__}"
                )

        self._logger.debug(f"Created {implementation.__name__}")
        return implementation(**kwargs)

    def configure_default_services(self) -> None:
        """Configure default service registrations."""
        from ..core.services import (
            MovieBackend,
            MovieListController,
            RemotePager,
            ViewProjector,
        )

        if not self.is_registered(IMovieBackend):
            self.register_singleton(IMovieBackend, MovieBackend)  # type: ignore
        self.register_singleton(RemotePager, RemotePager)
        self.register_singleton(ViewProjector, ViewProjector)
        self.register_singleton(MovieListController, MovieListController)

        self._logger.info("Default services configured")

    async def close(self) -> None:
        """Close services that hold network sessions."""
        backend = self._singletons.get(IMovieBackend)
        if backend is not None:
            await backend.close()
            self._logger.debug("Backend session closed")

    async def __aenter__(self) -> "Container":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
