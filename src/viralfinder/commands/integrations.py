#!/usr/bin/env python3
"""
Integrations command endpoints for inspecting external service connections.
"""

import logging
from argparse import Namespace

from .base import BaseCommand

logger = logging.getLogger(__name__)

PROVIDER_LABELS = {
    'apify': "🕸️  Apify (Instagram hashtags)",
    'serper': "🔎 Serper (Google search)",
    'openrouter': "🤖 OpenRouter (content analysis)",
    'supabase': "🗄️  Supabase (record store)",
}


class IntegrationsCommand(BaseCommand):
    """Handle external integration operations."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute integrations subcommand."""
        try:
            if subcommand == "status":
                return self.status(args)
            elif subcommand == "test":
                return self.test(args)
            else:
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1

        except Exception as e:
            return self.handle_error(e, f"integrations {subcommand}")

    def status(self, args: Namespace) -> int:
        """Show which providers are configured."""
        status = self.config.integration_status()

        print("\n=== Integration Status ===")
        for name, configured in status.items():
            label = PROVIDER_LABELS.get(name, name)
            print(f"{label}: {'✅ Configured' if configured else '⚪ Not configured (fallback in use)'}")

        print(f"\nRecord store backend: {self.config.database.backend}")
        return 0

    def test(self, args: Namespace) -> int:
        """Test the analysis provider connection."""
        client = self.create_llm_client()
        if client is None:
            print("⚪ OpenRouter not configured - fallback analysis will be used")
            return 0

        print("🔍 Testing OpenRouter connection...")
        if client.test_connection():
            print("✅ OpenRouter integration working")
            return 0
        print("❌ OpenRouter integration failed")
        return 1
