#!/usr/bin/env python3
"""
Dependency Injection Container

Provides a centralized way to build the pipeline's collaborators from
configuration. Supports singleton and factory registrations.
"""

import logging
from typing import Any, Dict, Callable, TypeVar, Optional
from functools import wraps
import threading

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Container:
    """Simple dependency injection container with lifecycle management."""

    def __init__(self):
        """Initialize empty container."""
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def register_singleton(self, service_name: str, factory: Callable[[], T]) -> None:
        """
        Register a service as singleton (created once, reused).

        Args:
            service_name: Unique name for the service
            factory: Function that creates the service instance
        """
        with self._lock:
            self._factories[service_name] = singleton(factory) if not getattr(factory, '_is_singleton', False) else factory
            self._singletons.pop(service_name, None)

    def register_factory(self, service_name: str, factory: Callable[[], T]) -> None:
        """
        Register a service as factory (new instance each time).

        Args:
            service_name: Unique name for the service
            factory: Function that creates service instances
        """
        with self._lock:
            self._factories[service_name] = factory

    def register_instance(self, service_name: str, instance: T) -> None:
        """
        Register an existing instance as singleton.

        Args:
            service_name: Unique name for the service
            instance: Pre-created service instance
        """
        with self._lock:
            self._singletons[service_name] = instance

    def get(self, service_name: str) -> Any:
        """
        Get service instance by name.

        Raises:
            KeyError: If service is not registered
        """
        if service_name in self._singletons:
            return self._singletons[service_name]

        if service_name not in self._factories:
            raise KeyError(f"Service '{service_name}' not registered")

        with self._lock:
            factory = self._factories[service_name]

            if getattr(factory, '_is_singleton', False):
                # Double-check under the lock
                if service_name not in self._singletons:
                    self._singletons[service_name] = factory()
                    logger.debug(f"Created singleton instance for '{service_name}'")
                return self._singletons[service_name]

            instance = factory()
            logger.debug(f"Created new instance for '{service_name}'")
            return instance

    def clear(self) -> None:
        """Clear all registered services and instances."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()


def singleton(factory_func: Callable[[], T]) -> Callable[[], T]:
    """
    Decorator to mark a factory function as singleton.

    Usage:
        @singleton
        def create_record_store():
            return InMemoryRecordStore()
    """
    @wraps(factory_func)
    def wrapper():
        return factory_func()

    wrapper._is_singleton = True
    return wrapper


# Global container instance
_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get global container instance (thread-safe singleton)."""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = Container()
                _setup_default_services(_container)
    return _container


def reset_container() -> None:
    """Reset global container (useful for testing)."""
    global _container
    with _container_lock:
        if _container:
            record_store = _container._singletons.get('record_store')
            if record_store is not None:
                record_store.close()
            _container.clear()
        _container = None


def _setup_default_services(container: Container) -> None:
    """Set up default service registrations with configuration injection."""

    @singleton
    def create_config():
        from .config import get_config
        return get_config()

    @singleton
    def create_record_store():
        from .database import get_record_store
        return get_record_store(container.get('config'))

    def create_apify_client():
        from viralfinder.integrations import ApifyClient
        config = container.get('config')
        if not config.has_apify():
            return None
        return ApifyClient(config.providers.apify_api_key, timeout=config.app.request_timeout)

    def create_serper_client():
        from viralfinder.integrations import SerperClient
        config = container.get('config')
        if not config.has_serper():
            return None
        return SerperClient(config.providers.serper_api_key, timeout=config.app.request_timeout)

    def create_llm_client():
        from viralfinder.integrations import OpenRouterClient
        config = container.get('config')
        if not config.has_openrouter():
            return None
        return OpenRouterClient.from_config(config)

    @singleton
    def create_source_registry():
        from .sources import build_default_registry
        return build_default_registry(
            apify_client=container.get('apify_client'),
            serper_client=container.get('serper_client'),
        )

    def create_content_analyzer():
        from .analysis import ContentAnalyzer
        return ContentAnalyzer(llm_client=container.get('llm_client'))

    def create_orchestrator():
        from .orchestrator import SearchOrchestrator
        config = container.get('config')
        return SearchOrchestrator(
            registry=container.get('source_registry'),
            store=container.get('record_store'),
            analyzer=container.get('content_analyzer'),
            max_workers=config.app.max_workers,
        )

    def create_search_service():
        from .search_service import SearchService
        config = container.get('config')
        return SearchService(
            orchestrator=container.get('orchestrator'),
            store=container.get('record_store'),
            recent_limit=config.app.recent_searches_limit,
        )

    # Register services
    container.register_singleton('config', create_config)
    container.register_singleton('record_store', create_record_store)
    container.register_singleton('source_registry', create_source_registry)

    # Non-singletons
    container.register_factory('apify_client', create_apify_client)
    container.register_factory('serper_client', create_serper_client)
    container.register_factory('llm_client', create_llm_client)
    container.register_factory('content_analyzer', create_content_analyzer)
    container.register_factory('orchestrator', create_orchestrator)
    container.register_factory('search_service', create_search_service)

    logger.debug("Default services registered in container")
