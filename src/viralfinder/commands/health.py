#!/usr/bin/env python3
"""
Health check command for monitoring system status.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from viralfinder.core.config import validate_config
from viralfinder.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class HealthCommand(BaseCommand):
    """Handle system health monitoring and diagnostics."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute health subcommand."""
        try:
            if subcommand == "check":
                return self.check(args)
            else:
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1

        except Exception as e:
            return self.handle_error(e, f"health {subcommand}")

    def check(self, args: Namespace) -> int:
        """Run comprehensive health check."""
        print("🏥 System Health Check")
        print("=" * 50)

        overall_healthy = True

        print("\n⚙️  Configuration:")
        try:
            validate_config(self.config)
            print("  ✅ Configuration: OK")
        except ConfigurationError as e:
            print(f"  ❌ Configuration: {e.context.get('issue', e)}")
            overall_healthy = False

        print("\n📊 Record Store:")
        health = self.record_store.health_check()
        backend = health.get('backend', self.config.database.backend)
        if health.get('connected'):
            print(f"  ✅ {backend}: OK")
        else:
            print(f"  ❌ {backend}: FAILED")
            print(f"     Error: {health.get('error', 'Unknown error')}")
            overall_healthy = False

        print("\n🔌 Discovery Sources:")
        for platform, source_health in self.source_registry.health_check().items():
            if source_health.get('available'):
                fallback = " (+ fallback)" if source_health.get('fallback_configured') else ""
                print(f"  ✅ {platform}{fallback}")
            else:
                print(f"  ⚠️  {platform}: no provider configured, discovery will return nothing")

        print("\n🤖 Content Analysis:")
        if self.config.has_openrouter():
            print(f"  ✅ OpenRouter ({self.config.providers.openrouter_model})")
        else:
            print("  ⚠️  OpenRouter not configured, fallback estimates in use")

        print("\n" + "=" * 50)
        print("✅ System healthy" if overall_healthy else "❌ System has problems")
        return 0 if overall_healthy else 1
