#!/usr/bin/env python3
"""
CWLV - Main Entry Point
Run the log viewer terminal UI, or serve a log catalog over HTTP
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from CWLV.config import Settings
from CWLV.log_setup import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cwlv", description="CloudWatch-style log viewer")
    subparsers = parser.add_subparsers(dest="command")

    tui = subparsers.add_parser("tui", help="Run the terminal UI (default)")
    tui.add_argument("--api-url", help="Base URL of the log API (overrides CWLV_API_URL)")

    serve = subparsers.add_parser("serve", help="Serve a JSON log catalog over HTTP")
    serve.add_argument("--catalog", type=Path, help="Catalog file (overrides CWLV_CATALOG)")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def run_tui(settings: Settings) -> int:
    from CWLV.UI import run_app

    log_file = configure_logging(settings.log_dir, settings.log_level)
    print("Starting CWLV Terminal UI...")
    print(f"API: {settings.api_url}  Log file: {log_file}")
    print("Press 'q' to quit, 'r' to refresh groups, 's' to search, 'e' to export, 'c' to clear, 'd' to dismiss errors")
    print("-" * 80)
    run_app(settings)
    return 0


def run_server(settings: Settings, host: str, port: int) -> int:
    import uvicorn

    from CWLV.server import InMemoryLogSource, create_app

    configure_logging(settings.log_dir, settings.log_level, console=True)
    if settings.catalog_path is None:
        print("No catalog given: pass --catalog or set CWLV_CATALOG", file=sys.stderr)
        return 2

    source = InMemoryLogSource.from_json_file(settings.catalog_path)
    uvicorn.run(create_app(source, settings), host=host, port=port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    try:
        if args.command == "serve":
            if args.catalog:
                settings.catalog_path = args.catalog
            return run_server(settings, args.host, args.port)

        if getattr(args, "api_url", None):
            settings.api_url = args.api_url
        return run_tui(settings)
    except KeyboardInterrupt:
        print("\nCWLV terminated by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
