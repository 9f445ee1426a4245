#!/usr/bin/env python3
"""
Sources command: inspect and probe the configured feeds.
"""

from argparse import Namespace

from .base import BaseCommand


class SourcesCommand(BaseCommand):
    """List configured feed sources and check their availability."""

    SUBCOMMANDS = ['list', 'check']

    def describe(self) -> str:
        return "Feed source operations"

    def list(self, args: Namespace) -> int:
        print(f"📰 Configured sources ({len(self.registry)})")
        print("=" * 50)
        for source in self.registry:
            print(f"  • {source.name} [{source.category}]")
            print(f"    {source.url}")
        return 0

    def check(self, args: Namespace) -> int:
        """HEAD every source; exit code 1 if any is unavailable."""
        print("🏥 Source Health Check")
        print("=" * 50)

        all_available = True
        for source in self.registry:
            health = source.health_check(
                timeout=self.config.feeds.timeout,
                user_agent=self.config.feeds.user_agent
            )
            if health.get('available'):
                print(f"  ✅ {source.name}: {health['status_code']} ({health['response_time_ms']:.0f}ms)")
            else:
                detail = health.get('error') or f"HTTP {health.get('status_code')}"
                print(f"  ❌ {source.name}: {detail}")
                all_available = False

        return 0 if all_available else 1
