from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from regenurl.app import regenerate_product_urls
from regenurl.config import configure_logging, get_regeneration_config
from regenurl.domain.model import ALL_STORES

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from regenurl.domain.model import StoreSelector

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Regenerate product URL rewrites")
    parser.add_argument(
        "product_ids",
        nargs="*",
        type=int,
        metavar="PRODUCT_ID",
        help="Products to regenerate (default: every enabled, visible product)",
    )
    parser.add_argument(
        "-s",
        "--store",
        type=str,
        default="all",
        help="Store ID to regenerate, or 'all' (default: %(default)s)",
    )
    parser.add_argument(
        "--batch-limit",
        type=int,
        default=None,
        help="Products per cache invalidation request (defaults to config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(list(argv))


def _parse_store(value: str) -> StoreSelector:
    normalized = value.strip().lower()
    if normalized == "all":
        return ALL_STORES
    try:
        store_id = int(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid store: {value} (expected an ID or 'all')") from exc
    if store_id < 0:
        raise ValueError(f"Invalid store: {value} (store IDs are non-negative)")
    return store_id


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        store = _parse_store(parsed_args.store)
        if parsed_args.batch_limit is not None and parsed_args.batch_limit < 1:
            raise ValueError("Batch limit must be positive")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        config = get_regeneration_config()
        if parsed_args.batch_limit is not None:
            config = replace(config, invalidation_batch_limit=parsed_args.batch_limit)
        result = regenerate_product_urls(parsed_args.product_ids, store, config=config)
    except Exception:
        log.exception("Fatal error during URL regeneration")
        sys.exit(1)

    if result.conflicts:
        log.warning("%s product(s) skipped because of duplicated URLs", len(result.conflicts))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
