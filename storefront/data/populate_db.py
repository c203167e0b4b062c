"""Seed the active backend's catalog with the built-in menu.

Usage:
  python -m storefront.data.populate_db [--force]
"""
import argparse

from ..services.product_service import ProductService
from .seed_catalog import DEFAULT_PRODUCTS


def populate_products(service: ProductService = None, force: bool = False) -> int:
    """Copy the default menu into the catalog; returns how many were created."""
    service = service or ProductService()
    existing = service.get_all_products()
    if existing and not force:
        print(f"Catalog already has {len(existing)} products. Skipping population.")
        return 0

    created = 0
    for product in DEFAULT_PRODUCTS:
        service.create_product(product.model_dump(exclude={"id", "created_at", "updated_at"}))
        created += 1
    print(f"Successfully populated the catalog with {created} products.")
    return created


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the storefront catalog")
    parser.add_argument("--force", action="store_true", help="seed even if products exist")
    args = parser.parse_args()
    populate_products(force=args.force)
