"""
Import deck CSV files into the vocabulary store.

Each CSV needs `word` and `meaning` columns; rows missing either are
skipped and listed. Re-importing the same file merges content into the
existing records (scheduling state is kept).

Usage:
    python -m scripts.import_deck data/decks/ielts.csv
    python -m scripts.import_deck data/decks/*.csv --source "IELTS 7.0" --dry-run
"""

import argparse
import logging
import sys

from vocab import config
from vocab.errors import InvalidWordDataError
from vocab.importing import import_deck, read_deck
from vocab.service import build_service

logger = logging.getLogger("scripts.import_deck")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Import deck CSV files into the vocabulary store"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Deck CSV file(s)"
    )
    parser.add_argument(
        "--source",
        help="Source name for rows without one (default: file name)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate only, don't write to the store"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)"
    )

    args = parser.parse_args(argv)
    config.configure_logging(args.log_level)

    service = None if args.dry_run else build_service()
    failed = 0

    for path in args.paths:
        try:
            if service is None:
                result = read_deck(path, args.source)
            else:
                result = import_deck(service, path, args.source)
        except (OSError, InvalidWordDataError) as exc:
            logger.error("Cannot import %s: %s", path, exc)
            failed += 1
            continue

        action = "valid" if args.dry_run else "imported"
        print(f"{path}: {len(result.words)} {action}, {len(result.skipped)} skipped")
        for line, reason in result.skipped:
            print(f"  line {line}: {reason}")

    if service is not None:
        stats = service.get_stats()
        print(f"\nStore now holds {stats.total} words ({stats.new} new)")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
