#!/usr/bin/env python3
"""A small web UI for visual.dotpattern."""

from __future__ import annotations

import argparse
from typing import Sequence


def _parse_args(defaults, argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dot pattern web server")
    parser.add_argument("--host", default=defaults.host, help=f"Bind host (default: {defaults.host})")
    parser.add_argument("--port", default=defaults.port, type=int, help=f"Bind port (default: {defaults.port})")
    parser.add_argument("--debug", action="store_true", help="Enable verbose request logging")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    try:
        from apps.dotpattern_web.server import Defaults, run_server
    except ModuleNotFoundError as e:
        raise SystemExit("Missing dependencies. Install with `pip install -e .`") from e

    args = _parse_args(Defaults(), argv)
    run_server(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
