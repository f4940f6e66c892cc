"""
Reset the vocabulary store.

DANGEROUS: This deletes every record and its review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.reset_store
    python -m scripts.reset_store --rounds-only
"""

import argparse

from vocab import config
from vocab.service import build_service


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Reset the vocabulary store"
    )
    parser.add_argument(
        "--rounds-only",
        action="store_true",
        help="Only clear the wrong-in-round flags, keep all records"
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Don't ask for confirmation"
    )

    args = parser.parse_args(argv)
    config.configure_logging()
    service = build_service()

    if args.rounds_only:
        count = service.reset_round_tracking()
        print(f"✓ Cleared round flags on {count} records")
        return

    target = "test store" if config.is_test_mode() else "store"
    print("=" * 60)
    print(f"WARNING: Reset vocabulary {target}")
    print("=" * 60)
    print()
    print(f"This will DELETE all {len(service.get_all())} records:")
    print("  - Word content and scheduling state")
    print("  - Complete review history")
    print()

    if not args.yes:
        response = input("Are you sure you want to reset? (type 'yes' to confirm): ")
        if response.lower() != "yes":
            print("\nCancelled. No changes made.")
            return

    service.clear()
    print("✓ Store reset complete!")


if __name__ == "__main__":
    main()
