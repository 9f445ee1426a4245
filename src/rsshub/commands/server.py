#!/usr/bin/env python3
"""
Server command: run the HTTP application.
"""

from argparse import Namespace

import uvicorn

from .base import BaseCommand
from ..api import create_app


class ServerCommand(BaseCommand):
    """Run the RSS hub HTTP server."""

    SUBCOMMANDS = ['start']

    def describe(self) -> str:
        return "HTTP server operations"

    def start(self, args: Namespace) -> int:
        """Start uvicorn with the configured host and port."""
        host = getattr(args, 'host', None) or self.config.server.host
        port = getattr(args, 'port', None) or self.config.server.port

        app = create_app(self.config, self.registry)

        self.logger.info(f"RSS Hub server running on port {port}")
        self.logger.info(f"RSS feed available at: http://localhost:{port}/rss")
        self.logger.info(f"JSON feed available at: http://localhost:{port}/json")

        uvicorn.run(app, host=host, port=port, log_level=self.config.log_level.lower())
        return 0
