"""
DEV-ONLY SEED HELPER
--------------------
Writes a small demo catalog (products.json) and a few flash sales into the
data directory so the storefront banner has something to show locally.

Run:
  python -m src.dev_seed

Environment:
  APP_DATA_DIR  - data directory (default: ./data)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .config import load_config
from .dao import FLASH_SALES_FILE, PRODUCTS_FILE, FlashSaleRepo, JsonStore
from .flash_sales.banner import BannerBuilder
from .product_repo import JsonProductRepo


DEMO_PRODUCTS = [
    {"id": "p1", "name": "Robe wax", "price": 45.0, "category": "vetements", "stock": 12},
    {"id": "p2", "name": "Sac en raphia", "price": 29.9, "category": "accessoires", "stock": 30},
    {"id": "p3", "name": "Huile de coco", "price": 12.5, "category": "beaute", "stock": 80},
    {"id": "p4", "name": "Sandales cuir", "price": 64.0, "category": "chaussures", "stock": 7},
]


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds").replace("+00:00", "Z")


def seed(store: JsonStore, force: bool = False) -> None:
    if force or not store.read(PRODUCTS_FILE, []):
        store.write(PRODUCTS_FILE, DEMO_PRODUCTS)

    repo = FlashSaleRepo(store)
    if repo.get_all() and not force:
        return
    store.write(FLASH_SALES_FILE, [])

    now = datetime.now(timezone.utc)
    running = repo.create({
        "title": "Vente flash du week-end",
        "description": "Jusqu'a -30% sur une selection",
        "discount": 30,
        "startDate": _iso(now - timedelta(hours=1)),
        "endDate": _iso(now + timedelta(days=2)),
        "productIds": ["p1", "p2"],
        "order": 1,
        "backgroundColor": "#e11d48",
        "icon": "zap",
        "emoji": "⚡",
    })
    repo.set_active(running["id"], True)

    repo.create({
        "title": "Beaute express",
        "description": "Soins a prix doux",
        "discount": 15,
        "startDate": _iso(now + timedelta(days=3)),
        "endDate": _iso(now + timedelta(days=5)),
        "productIds": ["p3"],
        "order": 2,
    })


def main() -> None:
    settings = load_config()
    store = JsonStore(settings["DATA_DIR"])
    seed(store)
    banner = BannerBuilder(store, FlashSaleRepo(store), JsonProductRepo(store))
    products = banner.generate_banniere_flash_sale()
    print(f"Seeded data in {settings['DATA_DIR']} ({len(products)} banner products)")


if __name__ == "__main__":
    main()
