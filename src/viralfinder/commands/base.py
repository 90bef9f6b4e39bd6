#!/usr/bin/env python3
"""
Base command class for the modular command architecture.

Provides common functionality and interface that all commands inherit.
Uses dependency injection for better testability.
"""

import logging
from abc import ABC, abstractmethod
from typing import List
from argparse import Namespace

from viralfinder.core.container import get_container
from viralfinder.core.exceptions import ViralFinderError, ValidationError

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all command endpoints.

    Gives commands access to services from the dependency injection
    container and standard error handling.
    """

    def __init__(self, container=None):
        """
        Initialize base command with dependency injection container.

        Args:
            container: Optional container instance. If None, uses global container.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._container = container or get_container()

    @property
    def config(self):
        """Get configuration from container."""
        return self._container.get('config')

    @property
    def record_store(self):
        """Get record store from container."""
        return self._container.get('record_store')

    @property
    def source_registry(self):
        """Get source registry from container."""
        return self._container.get('source_registry')

    def create_search_service(self):
        """Create a search service wired from configuration."""
        return self._container.get('search_service')

    def create_llm_client(self):
        """Create the analysis client, or None when not configured."""
        return self._container.get('llm_client')

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def get_available_subcommands(self) -> List[str]:
        """
        Get list of available subcommands for this command.

        Returns:
            List of subcommand names
        """
        methods = []
        for attr_name in dir(type(self)):
            if attr_name.startswith('_') or isinstance(getattr(type(self), attr_name), property):
                continue
            if callable(getattr(self, attr_name)) and attr_name not in (
                    'execute', 'get_available_subcommands', 'handle_error',
                    'create_search_service', 'create_llm_client'):
                methods.append(attr_name)
        return methods

    def handle_error(self, error: Exception, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        error_msg = f"{context}: {error}" if context else str(error)

        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130
        if isinstance(error, ValidationError):
            self.logger.error(error_msg)
            return 22
        if isinstance(error, ViralFinderError):
            self.logger.error(f"{error_msg} {error.context}")
            return 1

        self.logger.error(error_msg, exc_info=True)
        return 1
