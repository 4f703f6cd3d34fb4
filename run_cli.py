#!/usr/bin/env python3
"""Start the Desktop Automate REPL: ``python run_cli.py [config.json]``."""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from agent.config import load_config
from agent.exceptions import ConfigError
from cli.cli_app import CLIApp


def main() -> int:
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.json"
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if not config.api.api_key:
        print("No API key configured; set api.api_key or AUTOMATE_API_KEY.", file=sys.stderr)

    asyncio.run(CLIApp(config).run())
    return 0


if __name__ == "__main__":
    sys.exit(main())
