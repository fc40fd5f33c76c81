"""Command-line sample: print data, headers and API metadata."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from .client import Cov19Client
from .config import Cov19ClientConfig, TransportConfig
from .core.errors import Cov19ApiError
from .data.queries import Cov19Query


def _pair(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")
    return key, value


def build_cli() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="uk-covid19",
        description="Query the UK coronavirus dashboard API.",
    )
    p.add_argument("--filter", dest="filters", type=_pair, action="append", default=[],
                   metavar="KEY=VALUE", help="Filter, e.g. areaType=nation (repeatable)")
    p.add_argument("--structure", type=_pair, action="append", default=[],
                   metavar="NAME=SOURCE", help="Output field mapping, e.g. newCases=newCasesByPublishDate")
    p.add_argument("--latest-by", default=None, help="Only return the latest value of this metric")
    p.add_argument("--endpoint", default=None, help="Override the API endpoint")
    p.add_argument("--timeout", type=float, default=10.0, help="Per-request timeout in seconds")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("data", help="Fetch all JSON pages and print records")
    sub.add_parser("xml", help="Fetch all XML pages and print the merged document")
    sub.add_parser("head", help="Print response headers for the query")
    sub.add_parser("options", help="Print the API description")
    sub.add_parser("last-update", help="Print the last update timestamp")
    return p


def _build_client(args: argparse.Namespace) -> Cov19Client:
    config_kwargs: dict[str, object] = {"transport": TransportConfig(timeout_seconds=args.timeout)}
    if args.endpoint:
        config_kwargs["endpoint"] = args.endpoint
    query = Cov19Query(
        filters=dict(args.filters),
        structure=dict(args.structure),
        latest_by=args.latest_by,
    )
    return Cov19Client(query, config=Cov19ClientConfig(**config_kwargs))


def _run(client: Cov19Client, command: str) -> None:
    if command == "data":
        result = client.get()
        for record in result.data:
            print(json.dumps(record, ensure_ascii=False))
        print(
            f"length={result.length} total_pages={result.total_pages} "
            f"last_update={result.last_update or 'unknown'}",
            file=sys.stderr,
        )
    elif command == "xml":
        print(client.get_xml().to_string())
    elif command == "head":
        for key, value in client.head().multi_items():
            print(f"{key} : {value}")
    elif command == "options":
        description = client.options()
        print(f"{description.title or '-'} {description.version or ''}".rstrip())
        for server in description.servers:
            print(f"server: {server}")
    elif command == "last-update":
        value = client.last_update()
        print(value.isoformat() if value is not None else "unknown")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_cli().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        with _build_client(args) as client:
            _run(client, args.command)
    except Cov19ApiError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


__all__ = [
    "build_cli",
    "main",
]


if __name__ == "__main__":
    raise SystemExit(main())
