"""
Samyra's Yummy Cakes storefront backend: System Documentation
==============================================================

This module-style README documents the architecture, persistence model,
order workflow and operational practices of the storefront backend. Run
`python README.py` to print it.

Table of Contents
-----------------
1. System Overview
2. Architecture
3. Persistence (remote vs local fallback)
4. Orders and the Status Workflow
5. Catalog
6. AI Chef and Chat Assistant
7. Configuration & Environment
8. Testing Strategy
9. Security & PII Handling
10. Running & Scripts
11. Troubleshooting

"""

from __future__ import annotations

import textwrap


def section(title: str, body: str) -> str:
    return f"\n{title}\n{'-' * len(title)}\n{body.strip()}\n"


SYSTEM_OVERVIEW = section(
    "1. System Overview",
    """
    A small storefront for a home bakery. Customers place custom cake orders
    (optionally designed with the AI chef), track them by order id or phone
    number, and browse the menu. The owner manages orders and the catalog from
    a password-gated admin dashboard.
    """,
)


ARCHITECTURE = section(
    "2. Architecture",
    """
    - `storefront/app/main.py`: FastAPI routes (public, signed-in customer, admin).
    - `storefront/services/`: OrderService, ProductService, ImageStorage,
      status workflow tables, tracking search, id generator.
    - `storefront/data/`: hosted backend client (PostgREST + storage), auth
      client, local fallback stores, default menu and seeding script.
    - `storefront/schemas/`: pydantic models for records and API I/O.
    - `storefront/utils/`: logger, error types, PII masking, admin password check.
    """,
)


PERSISTENCE = section(
    "3. Persistence (remote vs local fallback)",
    """
    - Remote mode: `SUPABASE_URL` and `SUPABASE_ANON_KEY` both set. Orders and
      products live in the `orders` / `products` tables, images in the
      `STORAGE_BUCKET` bucket.
    - Local mode: otherwise. Each collection is one JSON array under
      `samyra_orders` / `samyra_products` in the local store (JSON files,
      Redis, or memory). Images become base64 data URLs.
    - The mode is checked on every call, so the switch needs no restart.
    - Corrupt local data reads as empty; remote read failures show as
      "not found" / empty lists; failed creates return HTTP 503.
    """,
)


ORDER_FLOW = section(
    "4. Orders and the Status Workflow",
    """
    - New orders get `ORD-<base36 ms>-<4 chars>`, status `pending`, equal
      created/updated timestamps.
    - Advance path: pending → confirmed → baking → ready → out_for_delivery → delivered.
    - Cancel is offered from any non-terminal status.
    - Writes accept any status value; the path above only drives the admin buttons.
    - Owner notes are kept unless a new note is supplied.
    """,
)


CATALOG = section(
    "5. Catalog",
    """
    - Public menu = active products by `sort_order`.
    - An empty or unreachable catalog falls back to the built-in default menu.
    - Admin can create, edit, hide/show and delete products and upload photos.
    - Seed with `python -m storefront.data.populate_db`.
    """,
)


AI_FEATURES = section(
    "6. AI Chef and Chat Assistant",
    """
    - Gemini `generateContent` over HTTPS (`storefront/app/generate.py`).
    - Concept: strict JSON (name, description, suggestedFlavors, visualPrompt).
    - Image: 1:1 cake photo returned as a data URL.
    - Without a key, or on any failure, demo content is returned instead.
    """,
)


CONFIG_ENV = section(
    "7. Configuration & Environment",
    """
    - `.env` loaded via python-dotenv in `storefront/app/config.py`.
    - SUPABASE_URL, SUPABASE_ANON_KEY, STORAGE_BUCKET
    - GEMINI_API_KEY (or API_KEY), GEMINI_TEXT_MODEL, GEMINI_IMAGE_MODEL
    - ADMIN_PASSWORD
    - LOCAL_STORE_BACKEND (file|redis|memory), LOCAL_STORE_DIR, REDIS_HOST/PORT/DB
    - REQUEST_TIMEOUT, LOG_LEVEL
    """,
)


TESTING = section(
    "8. Testing Strategy",
    """
    - `tests/` holds unittest suites run by pytest.
    - Services run against MemoryStore plus a mocked remote client.
    - API tests use FastAPI's TestClient with dependency overrides.
    - Run: `python tests/run_tests.py --all` or `python -m pytest tests/`.
    """,
)


SECURITY = section(
    "9. Security & PII Handling",
    """
    - Phone numbers are masked in logs (`mask_pii`).
    - The admin password is compared in constant time; it is a shared secret,
      not real authentication.
    - Customer order lists are keyed by phone string only; anyone who knows a
      phone number can see its orders.
    """,
)


RUNNING = section(
    "10. Running & Scripts",
    """
    - `uvicorn storefront.app.main:app --reload`
    - `python -m storefront.scripts.inspect_db [--show-phones]`
    - `python -m storefront.app.generate` to try the AI chef by hand.
    """,
)


TROUBLESHOOTING = section(
    "11. Troubleshooting",
    """
    - Orders "disappear" after setting SUPABASE_*: local and remote data are
      separate; nothing is migrated between them.
    - Redis configured but unreachable: the store silently falls back to
      memory and data is lost on restart (check the startup warning).
    - 503 on order submit: check the hosted backend's table permissions.
    """,
)


def as_text() -> str:
    return "\n".join(
        [
            SYSTEM_OVERVIEW,
            ARCHITECTURE,
            PERSISTENCE,
            ORDER_FLOW,
            CATALOG,
            AI_FEATURES,
            CONFIG_ENV,
            TESTING,
            SECURITY,
            RUNNING,
            TROUBLESHOOTING,
        ]
    )


def main() -> None:
    print(textwrap.dedent(as_text()))


if __name__ == "__main__":
    main()
