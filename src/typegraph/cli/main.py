#!/usr/bin/env python3
"""
Typegraph CLI - Main entry point.

Usage:
    typegraph execute app.schema:root query.graphql        # Run a query
    typegraph execute app.schema:root query.graphql --variables vars.yaml --sync
    typegraph types app.schema:root                        # List schema types
    typegraph --app-dir example execute starwars:root example/hero.graphql --context starwars:context

SCHEMA is "module:attribute" naming a RootNode, or a callable returning one.
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml

from ..config import EngineConfig, load_config
from ..core.errors import TypegraphError
from ..runtime.assembler import ResponseAssembler
from ..runtime.execute import execute, execute_async
from ..schema.meta import EnumMeta, InputObjectMeta, InterfaceMeta, ObjectMeta, UnionMeta
from ..schema.root import RootNode

logger = logging.getLogger(__name__)


def import_object(reference: str) -> Any:
    """Import "package.module:attribute"."""
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Expected 'module:attribute', got '{reference}'")
    module = importlib.import_module(module_name)
    target: Any = module
    for part in attribute.split("."):
        target = getattr(target, part)
    return target


def load_root(reference: str) -> RootNode:
    """Load the RootNode named by a reference, calling it if it is a factory."""
    target = import_object(reference)
    if not isinstance(target, RootNode) and callable(target):
        target = target()
    if not isinstance(target, RootNode):
        raise ValueError(f"'{reference}' is not a RootNode")
    logger.debug(f"Loaded schema {reference}: {target!r}")
    return target


def cmd_execute(args: argparse.Namespace) -> int:
    """Execute a query file and print the JSON response."""
    try:
        root = load_root(args.schema)
    except (ImportError, AttributeError, ValueError, TypegraphError) as e:
        print(f"Error loading schema: {e}")
        return 1

    query_path = Path(args.query)
    if not query_path.exists():
        print(f"Error: {query_path} not found.")
        return 1

    variables = None
    if args.variables:
        variables = yaml.safe_load(Path(args.variables).read_text()) or {}

    config = EngineConfig()
    if args.config:
        loaded = load_config(args.config)
        if loaded is None:
            print(f"Error: {args.config} not found.")
            return 1
        config = loaded

    context = None
    if args.context:
        try:
            context = import_object(args.context)()
        except (ImportError, AttributeError, ValueError) as e:
            print(f"Error loading context factory: {e}")
            return 1

    kwargs = {
        "operation_name": args.operation,
        "variables": variables,
        "context": context,
        "config": config,
    }
    source = query_path.read_text()
    try:
        if args.sync:
            value, errors = execute(source, root, **kwargs)
        else:
            value, errors = asyncio.run(execute_async(source, root, **kwargs))
    except TypegraphError as e:
        print(f"Error: {e}")
        return 1

    print(ResponseAssembler().to_json(value, errors, indent=2))
    return 0


def cmd_types(args: argparse.Namespace) -> int:
    """List the types of a schema."""
    try:
        root = load_root(args.schema)
    except (ImportError, AttributeError, ValueError, TypegraphError) as e:
        print(f"Error loading schema: {e}")
        return 1

    for name, meta in sorted(root.schema.types.items()):
        print(f"{meta.kind.value:<13} {name}")
        if isinstance(meta, (ObjectMeta, InterfaceMeta)):
            for field_meta in meta.fields:
                print(f"    {field_meta.name}: {field_meta.field_type}")
        elif isinstance(meta, InputObjectMeta):
            for input_field in meta.input_fields:
                print(f"    {input_field.name}: {input_field.arg_type}")
        elif isinstance(meta, EnumMeta):
            for enum_value in meta.values:
                print(f"    {enum_value.name}")
        elif isinstance(meta, UnionMeta):
            print(f"    = {' | '.join(meta.of_type_names)}")

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="typegraph",
        description="Typegraph - execute typed queries against a schema"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--app-dir",
        default=".",
        help="Directory prepended to sys.path before importing references (default: current directory)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # execute
    execute_parser = subparsers.add_parser("execute", help="Execute a query")
    execute_parser.add_argument("schema", help="RootNode reference (module:attribute)")
    execute_parser.add_argument("query", help="Query document file")
    execute_parser.add_argument("--operation", "-o", help="Operation name")
    execute_parser.add_argument("--variables", "-v", help="YAML/JSON file with variable values")
    execute_parser.add_argument("--config", "-c", help="Engine config file (typegraph.yaml)")
    execute_parser.add_argument("--context", help="Context factory reference (module:attribute)")
    execute_parser.add_argument("--sync", action="store_true", help="Use synchronous execution")

    # types
    types_parser = subparsers.add_parser("types", help="List schema types")
    types_parser.add_argument("schema", help="RootNode reference (module:attribute)")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=getattr(logging, parsed.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not parsed.command:
        parser.print_help()
        return 0

    app_dir = str(Path(parsed.app_dir).resolve())
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)

    commands = {
        "execute": cmd_execute,
        "types": cmd_types,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
