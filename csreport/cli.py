"""Command-line access to the report API through the primary/fallback transport.

Usage:
    csreport submit report.json [--code MYCODE01]
    csreport query MYCODE01
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from csreport.client import ReportServiceClient
from csreport.config import get_settings
from csreport.errors import ReportServiceError
from csreport.logging_setup import configure_structured_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="csreport", description="Submit or look up customer-visit reports")
    parser.add_argument("--primary-url", help="Primary API base URL (default: CSR_PRIMARY_BASE_URL)")
    parser.add_argument("--fallback-url", help="Fallback API base URL (default: CSR_FALLBACK_BASE_URL)")
    parser.add_argument("--timeout", type=float, help="Per-attempt timeout in seconds")
    commands = parser.add_subparsers(dest="command", required=True)

    submit = commands.add_parser("submit", help="Submit a report from a JSON file")
    submit.add_argument("file", type=Path, help="Path to the report JSON payload")
    submit.add_argument("--code", help="Custom lookup code (6-12 letters or digits)")

    query = commands.add_parser("query", help="Look up a report by its code")
    query.add_argument("code", help="Lookup code")
    return parser


async def run(args: argparse.Namespace) -> tuple[bool, dict[str, Any]]:
    settings = get_settings()
    client = ReportServiceClient.from_urls(
        args.primary_url or settings.primary_base_url,
        args.fallback_url or settings.fallback_base_url,
        timeout_seconds=args.timeout or settings.request_timeout_seconds,
    )
    try:
        if args.command == "submit":
            payload = json.loads(args.file.read_text(encoding="utf-8"))
            if args.code:
                payload["custom_lookup_code"] = args.code
            result = await client.submit_report(payload)
        else:
            result = await client.query_report(args.code)
        return result.success, result.model_dump(exclude_none=True)
    except ReportServiceError as exc:
        return False, {"success": False, "message": exc.message}
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_structured_logging()
    ok, output = asyncio.run(run(args))
    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
