#!/usr/bin/env python3
"""
Static policy scan of the code base.

Reports string-built SQL or shell commands, weak crypto/RNG primitives,
unencoded values in markup, unsafe deserializers and hardcoded secrets.
Exits 1 when anything is found.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from security.static_rules import scan_paths  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger("mealplanner.scan")

DEFAULT_PATHS = ["app", "api", "domain", "repositories", "services", "security", "main.py"]
DEFAULT_EXCLUDE = ["tests", "__pycache__", ".venv", "venv"]


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Scan Python sources for insecure coding patterns.")
    p.add_argument(
        "paths",
        nargs="*",
        default=DEFAULT_PATHS,
        help="Files or directories to scan (default: the application packages)",
    )
    p.add_argument(
        "--exclude",
        action="append",
        default=list(DEFAULT_EXCLUDE),
        help="Directory name to skip; may be repeated",
    )
    args = p.parse_args(argv)

    try:
        findings = scan_paths(args.paths, exclude=args.exclude)
    except SyntaxError as exc:
        logger.error("Cannot parse %s: %s", exc.filename, exc.msg)
        return 2

    for finding in findings:
        print(finding)

    if findings:
        logger.error("%d finding(s)", len(findings))
        return 1
    logger.info("No findings")
    return 0


if __name__ == "__main__":
    sys.exit(main())
