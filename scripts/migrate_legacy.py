"""
Migrate a legacy SRS JSON store into the vocabulary store.

Entries whose (source, word, meaning) already exist are left untouched.

Usage:
    python -m scripts.migrate_legacy old_srs_store.json
"""

import argparse
import sys

from vocab import config
from vocab.importing import load_legacy_file
from vocab.service import build_service


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Migrate a legacy SRS JSON store"
    )
    parser.add_argument(
        "path",
        help="Legacy store JSON file"
    )

    args = parser.parse_args(argv)
    config.configure_logging()

    old_store = load_legacy_file(args.path)
    service = build_service()
    added = service.import_legacy(old_store)

    print(f"Migrated {added} of {len(old_store)} legacy entries")
    return 0


if __name__ == "__main__":
    sys.exit(main())
