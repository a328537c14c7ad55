"""Storefront database management CLI.

Creates and drops the storefront schema with the setup_db/drop_db utilities,
and registers catalogue products from the command line for local testing.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py add-product "Desk lamp" 1200 --inventory 30
"""

import argparse
import sys


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def add_product(name, price, inventory, unlisted):
    from storefront.catalogue.product import ProductStatus
    from storefront.catalogue.registration import RegisterProduct
    from storefront.domain import storefront

    storefront.init()
    with storefront.domain_context():
        product_id = storefront.process(
            RegisterProduct(
                name=name,
                price=price,
                inventory=inventory,
                listed=(ProductStatus.UNLISTED if unlisted else ProductStatus.LISTED).value,
            ),
            asynchronous=False,
        )
    print(f"Registered product {product_id}")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    product_parser = subparsers.add_parser("add-product", help="Register a catalogue product")
    product_parser.add_argument("name")
    product_parser.add_argument("price", type=int, help="Price in the smallest currency unit")
    product_parser.add_argument("--inventory", type=int, default=0)
    product_parser.add_argument("--unlisted", action="store_true", help="Register without listing it")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "add-product":
        add_product(args.name, args.price, args.inventory, args.unlisted)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
