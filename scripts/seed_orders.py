"""Load qualified order numbers into the order store before a campaign.

Reads one order number per line (or the first column of a CSV file) and
creates an unplayed order for each. Orders that already exist are left
untouched, so re-running the script never resets a played order.
Settings come from the environment and from a `.env` file in the working
directory when present.

Usage:
  DB_BACKEND=firestore FIREBASE_SERVICE_ACCOUNT_KEY=... python scripts/seed_orders.py orders.csv
  DB_BACKEND=mongo MONGODB_URI=mongodb://localhost:27017 python scripts/seed_orders.py orders.txt
  cat orders.txt | python scripts/seed_orders.py -

Options:
  --backend firestore|mongo   (default: DB_BACKEND)
  --skip-header               first row is a CSV header
  --dry-run                   parse and report only
"""

from __future__ import annotations

import argparse
import csv
import logging
import pathlib
import sys
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import asdict
from typing import TextIO

from dotenv import find_dotenv, load_dotenv
from marshmallow import ValidationError as MarshmallowValidationError

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from luckydraw.config import get_config
from luckydraw.db import create_order_store
from luckydraw.errors import ConfigurationError
from luckydraw.schemas.redemption import CheckOrderNumberSchema

logger = logging.getLogger(__name__)

_order_schema = CheckOrderNumberSchema()


def read_order_numbers(lines: Iterable[str], *, skip_header: bool = False) -> Iterator[str]:
    """Yield unique, valid order numbers from text or CSV lines."""

    seen: set[str] = set()
    rows = csv.reader(lines)
    if skip_header:
        next(rows, None)

    for line_no, row in enumerate(rows, start=2 if skip_header else 1):
        if not row:
            continue
        value = row[0].strip()
        if not value or value.startswith("#"):
            continue
        try:
            _order_schema.load({"orderNumber": value})
        except MarshmallowValidationError as exc:
            logger.warning("Skipping line %s (%r): %s", line_no, value, exc.messages)
            continue
        if value in seen:
            continue
        seen.add(value)
        yield value


def _open_source(path: str) -> TextIO:
    if path == "-":
        return sys.stdin
    return open(path, encoding="utf-8", newline="")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create unplayed order numbers in the order store")
    parser.add_argument("source", help="File with one order number per line, or '-' for stdin")
    parser.add_argument("--backend", dest="backend", choices=("firestore", "mongo"), default=None)
    parser.add_argument("--skip-header", action="store_true")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    source = _open_source(args.source)
    try:
        order_numbers = list(read_order_numbers(source, skip_header=args.skip_header))
    finally:
        if source is not sys.stdin:
            source.close()

    logger.info("Parsed %s order numbers", len(order_numbers))
    if args.dry_run:
        return 0

    config = asdict(get_config()())
    if args.backend:
        config["DB_BACKEND"] = args.backend

    try:
        store = create_order_store(config)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1

    created = store.add_orders(order_numbers)
    logger.info(
        "Created %s orders in %s (%s already present)",
        created,
        store.backend_name,
        len(order_numbers) - created,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
