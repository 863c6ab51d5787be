"""Taxonomy management CLI.

Creates and drops the database schema, and prints the current category tree.

Usage:
    python src/manage.py setup-db                      # Create all tables
    python src/manage.py drop-db                       # Drop all tables
    python src/manage.py show-tree --with-counts       # Print the nested tree
    python src/manage.py show-tree --flat              # Print the flat listing
"""

import argparse
import json
import sys


def _domain():
    from taxonomy.domain import taxonomy

    taxonomy.init()
    return taxonomy


def setup_database():
    from taxonomy.utils.db import setup_db

    domain = _domain()
    print("Creating taxonomy database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from taxonomy.utils.db import drop_db

    domain = _domain()
    print("Dropping taxonomy database schema...")
    drop_db(domain)
    print("Done.")


def show_tree(flat=False, with_counts=False):
    from taxonomy.category.listing import list_categories

    domain = _domain()
    with domain.domain_context():
        categories = list_categories(flat=flat, with_counts=with_counts)
    print(json.dumps(categories, indent=2))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Taxonomy management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    tree_parser = subparsers.add_parser("show-tree", help="Print active categories as JSON")
    tree_parser.add_argument("--flat", action="store_true", help="Print a flat sorted list instead of a tree")
    tree_parser.add_argument("--with-counts", action="store_true", help="Include product counts")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "show-tree":
        show_tree(flat=args.flat, with_counts=args.with_counts)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
