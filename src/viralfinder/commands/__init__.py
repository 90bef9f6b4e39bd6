#!/usr/bin/env python3
"""
Command endpoints for the viral content finder.

Each major functionality is handled by a dedicated command class.
"""

from typing import Dict, Type
from .base import BaseCommand
from .search import SearchCommand
from .integrations import IntegrationsCommand
from .health import HealthCommand

# Command registry for easy extension
COMMANDS: Dict[str, Type[BaseCommand]] = {
    'search': SearchCommand,
    'integrations': IntegrationsCommand,
    'health': HealthCommand,
}

def get_command(command_name: str, container=None) -> BaseCommand:
    """Get a command instance by name."""
    if command_name not in COMMANDS:
        available = ', '.join(COMMANDS.keys())
        raise ValueError(f"Unknown command '{command_name}'. Available: {available}")

    command_class = COMMANDS[command_name]
    return command_class(container)
