#!/usr/bin/env python3
"""
OAuth Flow Engine command line

Usage:
    oauth-flow-engine --list-flows               # List available flows
    oauth-flow-engine validate <id|file.json>    # Validate a definition
    oauth-flow-engine show <id>                  # Print a definition as JSON
    oauth-flow-engine render <id> [--section S]  # Render a definition to HTML
    oauth-flow-engine check-config [--schema]    # Validate the config file

Options:
    --definitions DIR   Definitions directory (default: from config)
    --config FILE       Config file (default: config.local.yaml)
    --debug             Verbose logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import config_schema, create_store, load_config, validate_config_file
from .core import FlowRegistry, FlowRenderer, ValidationError, validate_flow

logger = logging.getLogger(__name__)

SECTIONS = {
    "header": FlowRenderer.render_header,
    "config": FlowRenderer.render_config_panel,
    "steps": FlowRenderer.render_steps,
    "tokens": FlowRenderer.render_token_display,
    "page": FlowRenderer.render_full_page,
}


def setup_logging(debug: bool = False, level: str = "INFO") -> None:
    """Configure logging for command line use."""
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )

    # Suppress library loggers unless in debug mode
    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def build_registry(args: argparse.Namespace, config: dict) -> FlowRegistry:
    if args.definitions:
        config["definitions_dir"] = str(args.definitions)
    return FlowRegistry(store=create_store(config))


def list_flows(registry: FlowRegistry) -> int:
    summaries = registry.summaries()
    if not summaries:
        print(f"No flows found in {registry.store.describe()}.")
        return 0

    print(f"{'Flow ID':<28} {'State':<9} {'Name'}")
    print("-" * 80)
    for summary in summaries:
        name = summary.name[:40] + "..." if len(summary.name) > 40 else summary.name
        print(f"{summary.id:<28} {summary.state:<9} {name}")
    return 0


def validate_command(registry: FlowRegistry, target: str) -> int:
    """Validate a stored flow by id, or a JSON file by path."""
    path = Path(target)
    if path.suffix == ".json" and path.exists():
        try:
            flow = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error: Cannot read {path}: {e}", file=sys.stderr)
            return 1
    else:
        result = registry.load(target)
        if not result.ok:
            print(f"Error: {target}: {result.error}", file=sys.stderr)
            return 1
        flow = result.flow

    report = validate_flow(flow)
    print(report.format())
    return 0 if report.valid else 1


def show_command(registry: FlowRegistry, flow_id: str) -> int:
    result = registry.load(flow_id)
    if not result.ok:
        print(f"Error: {flow_id}: {result.error}", file=sys.stderr)
        return 1
    print(json.dumps(result.flow, indent=2, ensure_ascii=False))
    return 0


def render_command(
    registry: FlowRegistry,
    flow_id: str,
    section: str = "page",
    output: Optional[Path] = None,
) -> int:
    """Render one section of a valid flow to stdout or a file."""
    result = registry.load(flow_id)
    if not result.ok:
        print(f"Error: {flow_id}: {result.error}", file=sys.stderr)
        return 1

    try:
        validate_flow(result.flow).raise_if_invalid()
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    html = SECTIONS[section](FlowRenderer(result.flow))
    if output:
        output.write_text(html + "\n", encoding="utf-8")
        logger.info("Rendered %s (%s) to %s", flow_id, section, output)
    else:
        print(html)
    return 0


def check_config_command(config_path: Optional[Path], show_schema: bool = False) -> int:
    if show_schema:
        print(json.dumps(config_schema(), indent=2))
        return 0

    errors = validate_config_file(config_path)
    if errors:
        for error in errors:
            print(f"  ✗ {error}")
        return 1
    print("✓ Config OK")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oauth-flow-engine",
        description="Inspect, validate and render OAuth flow definitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("--definitions", type=Path, help="Definitions directory")
    parser.add_argument("--config", type=Path, help="Config file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--list-flows",
        action="store_true",
        help="List available flows"
    )

    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate a flow definition")
    validate_parser.add_argument("target", help="Flow id or path to a .json file")

    show_parser = subparsers.add_parser("show", help="Print a flow definition")
    show_parser.add_argument("flow_id")

    render_parser = subparsers.add_parser("render", help="Render a flow definition to HTML")
    render_parser.add_argument("flow_id")
    render_parser.add_argument("--section", choices=sorted(SECTIONS), default="page")
    render_parser.add_argument("--output", "-o", type=Path, help="Write HTML to a file")

    config_parser = subparsers.add_parser("check-config", help="Validate the config file")
    config_parser.add_argument("--schema", action="store_true", help="Print the config JSON Schema")

    args = parser.parse_args(argv)

    if args.command == "check-config":
        return check_config_command(args.config, args.schema)

    config = load_config(args.config)
    setup_logging(args.debug, config.get("logging", {}).get("level", "INFO"))
    registry = build_registry(args, config)

    if args.list_flows:
        return list_flows(registry)
    if args.command == "validate":
        return validate_command(registry, args.target)
    if args.command == "show":
        return show_command(registry, args.flow_id)
    if args.command == "render":
        return render_command(registry, args.flow_id, args.section, args.output)

    parser.print_usage()
    return 1


if __name__ == "__main__":
    sys.exit(main())
