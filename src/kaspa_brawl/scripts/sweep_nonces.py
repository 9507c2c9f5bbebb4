# src/kaspa_brawl/scripts/sweep_nonces.py
"""
Cron job removing expired and used login nonces.

Safe to run while the API is serving requests: the sweep is a single
conditional delete per backend.
"""

from __future__ import annotations

import argparse
import logging
import sys

from kaspa_brawl.core.errors import StorageError
from kaspa_brawl.core.settings import settings
from kaspa_brawl.services.housekeeping import sweep_once

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Delete expired or used login nonces.")
    parser.add_argument(
        "--backend",
        choices=("database", "redis"),
        default=None,
        help=f"Nonce backend to sweep (default: {settings.nonce_backend})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    backend = args.backend or settings.nonce_backend
    if backend == "memory":
        logger.error("The memory nonce backend lives inside the API process; nothing to sweep")
        return 2
    try:
        removed = sweep_once(backend)
    except StorageError as err:
        logger.error("Nonce sweep failed: %s", err)
        return 1
    print(f"Removed {removed} expired or used nonces")
    return 0


if __name__ == "__main__":
    sys.exit(main())
