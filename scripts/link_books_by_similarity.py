"""
Link library books to reading list entries by similarity.

For every user, each library book that is in no reading list yet is linked
to the best matching, still unlinked reading list entry when the match is
confident enough to apply without review.

Usage:
    python scripts/link_books_by_similarity.py [--database-url URL]
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load env vars
load_dotenv()

from shelflink.linking import LinkRepairService
from shelflink.storage import LinkRepository


def main() -> int:
    parser = argparse.ArgumentParser(description="Link library books to reading lists by similarity")
    parser.add_argument(
        "--database-url",
        default=os.getenv("DIRECT_URL") or os.getenv("DATABASE_URL"),
        help="Database URL (default: DIRECT_URL or DATABASE_URL)",
    )
    args = parser.parse_args()

    if not args.database_url:
        print("❌ DATABASE_URL or DIRECT_URL is not set")
        return 1

    repository = LinkRepository(args.database_url)
    service = LinkRepairService(repository)

    users = repository.list_users()
    print(f"Found {len(users)} users.\n")

    total_linked = 0
    for user in users:
        print("=" * 60)
        print(f"User: {user.email or user.id}")
        print("=" * 60)

        linked = service.link_books_by_similarity(user.id)
        for item in linked:
            print(f"✓ \"{item.book_title}\" → \"{item.reading_list_book_title}\" ({item.reading_list_name})")
            print(f"  Score: {item.score * 100:.1f}%")

        if linked:
            print(f"\n{len(linked)} books linked.\n")
        else:
            print("No new matches found.\n")

        total_linked += len(linked)

    print("=" * 60)
    print(f"TOTAL: {total_linked} books linked.")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
