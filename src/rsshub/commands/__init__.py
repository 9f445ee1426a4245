#!/usr/bin/env python3
"""
Command endpoints for the RSS hub CLI.
"""

from typing import Dict, Type
from .base import BaseCommand
from .server import ServerCommand
from .feed import FeedCommand
from .sources import SourcesCommand

# Command registry for easy extension
COMMANDS: Dict[str, Type[BaseCommand]] = {
    'server': ServerCommand,
    'feed': FeedCommand,
    'sources': SourcesCommand,
}


def get_command(command_name: str) -> BaseCommand:
    """Get a command instance by name."""
    if command_name not in COMMANDS:
        available = ', '.join(COMMANDS.keys())
        raise ValueError(f"Unknown command '{command_name}'. Available: {available}")

    command_class = COMMANDS[command_name]
    return command_class()
