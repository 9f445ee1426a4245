#!/usr/bin/env python3
"""
Base command class for the command architecture.

Provides common functionality and interface that all commands inherit.
"""

import logging
from abc import ABC, abstractmethod
from argparse import Namespace
from typing import List, Optional

from ..config import Config, get_config
from ..sources import SourceRegistry, get_default_registry

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all CLI commands.

    Subclasses list their subcommands in SUBCOMMANDS and implement a method
    of the same name for each.
    """

    SUBCOMMANDS: List[str] = []

    def __init__(self, config: Optional[Config] = None, registry: Optional[SourceRegistry] = None):
        """
        Initialize base command.

        Args:
            config: Optional configuration. If None, uses global config.
            registry: Optional source registry. If None, uses built-in sources.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._config = config
        self._registry = registry

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def registry(self) -> SourceRegistry:
        if self._registry is None:
            self._registry = get_default_registry()
        return self._registry

    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        if subcommand not in self.SUBCOMMANDS:
            available = ", ".join(self.SUBCOMMANDS)
            self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
            return 1

        try:
            return getattr(self, subcommand)(args)
        except Exception as e:
            return self.handle_error(e, f"{self.__class__.__name__} {subcommand}")

    @abstractmethod
    def describe(self) -> str:
        """One-line description for help output."""
        pass

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
        self.logger.error(error_msg, exc_info=True)

        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130
        elif isinstance(error, FileNotFoundError):
            return 2
        elif isinstance(error, PermissionError):
            return 13
        elif isinstance(error, ValueError):
            return 22
        else:
            return 1
