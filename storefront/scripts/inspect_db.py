#!/usr/bin/env python3
"""
Inspect the storefront data: print orders and products from whichever backend
is active, with per-status counts.

Usage:
  python -m storefront.scripts.inspect_db [--show-phones]

Notes:
- Uses the same services the API uses, so the remote/local switch applies.
- Safe read-only inspection; makes no writes.
"""

from __future__ import annotations

import argparse

from ..app.config import BackendConfig
from ..services import status_workflow as workflow
from ..services.order_service import OrderService
from ..services.product_service import ProductService
from ..utils.security import mask_pii


def line(ch: str = "-", width: int = 60) -> str:
    return ch * width


def print_orders(service: OrderService, show_phones: bool = False):
    print(line("="))
    print("Orders (newest first)")
    print(line("="))
    orders = service.get_all_orders()
    print(f"Total orders: {len(orders)}")
    for o in orders:
        phone = o.customer_phone if show_phones else mask_pii(o.customer_phone)
        print(
            f"- {o.id} | {workflow.status_label(o.status)} | {o.customer_name} ({phone}) "
            f"| event={o.event_date} | {o.cake_flavor or '-'} {o.cake_weight}"
        )
        if o.owner_notes:
            print(f"    note: {o.owner_notes}")
    print()
    print("Status counts:")
    for status, count in workflow.status_counts(orders).items():
        print(f"  {workflow.status_label(status):<18} {count}")
    print()


def print_products(service: ProductService):
    print(line("="))
    print("Products")
    print(line("="))
    products = service.get_all_products()
    print(f"Total products: {len(products)}")
    for p in products:
        state = "active" if p.is_active else "hidden"
        print(f"- #{p.sort_order} {p.id} {p.name} | {p.category} | {p.price_range} | {state}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Inspect storefront orders and products")
    parser.add_argument("--show-phones", action="store_true", help="print phone numbers unmasked")
    args = parser.parse_args()

    mode = "remote" if BackendConfig.from_env().is_remote_configured() else "local fallback"
    print(f"Backend: {mode}")
    print_orders(OrderService(), show_phones=args.show_phones)
    print_products(ProductService())


if __name__ == "__main__":
    main()
