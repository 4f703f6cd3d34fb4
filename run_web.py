#!/usr/bin/env python3
"""Web API entry point for Desktop Automate."""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from agent.config import load_config
from agent.exceptions import ConfigError
from web.app import create_app


def main():
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.json"
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    print(f"\n  Desktop Automate - Web API")
    print(f"  Model: {config.api.model}")
    print(f"  Endpoint: {config.api.endpoint}")
    print(f"  Listening on http://localhost:5000\n")

    app = create_app(config, config_path=config_path)
    app.run(host="127.0.0.1", port=5000, debug=False, threaded=True)


if __name__ == "__main__":
    main()
