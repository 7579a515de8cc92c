#!/usr/bin/env python3
"""
OAuth Flow Engine HTTP Service

Starts the FastAPI server for the flow definition API.

Usage:
    python server.py                    # Start on the configured port (default 3000)
    python server.py --port 8080        # Start on custom port
    python server.py --memory           # Keep saved definitions in memory only
"""

import argparse
import os
import sys
from pathlib import Path

# Ensure package is importable from a source checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

from oauth_flow_engine.config import CONFIG_PATH_ENV, STORAGE_MODE_ENV, load_config


def main():
    parser = argparse.ArgumentParser(
        description="OAuth Flow Engine HTTP Service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, help="Config file (default: config.local.yaml)")
    parser.add_argument("--host", default=None, help="Host to bind to (default: from config)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: from config)")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Serve definitions from memory (saves are not written to disk)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()

    # The app factory reads its config itself; hand choices over through the environment
    if args.config:
        os.environ[CONFIG_PATH_ENV] = str(args.config)
    if args.memory:
        os.environ[STORAGE_MODE_ENV] = "memory"

    config = load_config()
    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]

    print(f"Starting OAuth Flow Engine on http://{host}:{port}")
    print(f"API docs: http://{host}:{port}/docs")
    print()

    uvicorn.run(
        "oauth_flow_engine.server.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level=str(config["logging"]["level"]).lower(),
    )


if __name__ == "__main__":
    main()
