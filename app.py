#!/usr/bin/env python3
"""Blog content server — collection schema diagnostics over REST, plus a build-time check."""

import argparse
import logging
import sys

from flask import Flask

from config import CONTENT_DIR, PORT, STRICT_UNKNOWN_FIELDS, get_content_dir
from services.registry import build_registry

app = Flask(__name__)
app.config["CONTENT_DIR"] = CONTENT_DIR
app.config["COLLECTIONS"] = build_registry(strict=STRICT_UNKNOWN_FIELDS)

from routes.collections import bp as collections_bp  # noqa: E402

app.register_blueprint(collections_bp)


def run_check(registry, content_dir: str) -> int:
    """Validate every collection. Returns the process exit code (1 if any document fails)."""
    from services.content import check_all

    failed = 0
    for report in check_all(registry, content_dir):
        print(f"  {report.collection}: {len(report.records)} valid, {len(report.failures)} failed")
        for failure in report.failures:
            for v in failure.violations:
                print(f"    {failure.source_path}: [{v.code}] {v.message}")
        failed += len(report.failures)
    return 1 if failed else 0


def main():
    """Entry point for `blog-content` CLI command."""
    parser = argparse.ArgumentParser(description="Blog content schema checker")
    parser.add_argument(
        "--port", type=int, default=PORT, help=f"Port to listen on (default: {PORT})"
    )
    parser.add_argument("--content-dir", help=f"Content root (default: {CONTENT_DIR})")
    parser.add_argument(
        "--strict", action="store_true", help="Reject front-matter fields not in the schema"
    )
    parser.add_argument(
        "--check", action="store_true", help="Validate all collections and exit (non-zero on failure)"
    )
    cli_args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    content_dir = get_content_dir(cli_args.content_dir)
    registry = build_registry(strict=cli_args.strict or STRICT_UNKNOWN_FIELDS)

    if cli_args.check:
        print(f"\n  Checking {content_dir}\n")
        sys.exit(run_check(registry, content_dir))

    app.config["CONTENT_DIR"] = content_dir
    app.config["COLLECTIONS"] = registry

    print("\n  Blog Content Server v0.1.0")
    print(f"  Port: {cli_args.port}")
    print(f"  Content: {content_dir}")
    print(f"  Collections: {', '.join(registry.names())}\n")

    app.run(port=cli_args.port, threaded=True)


if __name__ == "__main__":
    main()
