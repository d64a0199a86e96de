from datetime import datetime, timedelta, timezone

import pytest

from src.app import create_app
from src.dao import PRODUCTS_FILE, FlashSaleRepo, JsonStore
from src.flash_sales.banner import BannerBuilder
from src.flash_sales.flash_sale_manager import FlashSaleManager
from src.product_repo import JsonProductRepo


PRODUCTS = [
    {"id": "p1", "name": "Robe wax", "price": 100},
    {"id": "p2", "name": "Sac en raphia", "price": 19.99},
    {"id": "p3", "name": "Huile de coco", "price": 50},
]

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}


def iso_from_now(**delta) -> str:
    """ISO timestamp relative to now, e.g. iso_from_now(hours=-1)"""
    return (datetime.now(timezone.utc) + timedelta(**delta)).isoformat()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    s = JsonStore(str(data_dir))
    s.write(PRODUCTS_FILE, PRODUCTS)
    return s


@pytest.fixture
def sale_repo(store):
    return FlashSaleRepo(store)


@pytest.fixture
def catalog(store):
    return JsonProductRepo(store)


@pytest.fixture
def banner(store, sale_repo, catalog):
    return BannerBuilder(store, sale_repo, catalog)


@pytest.fixture
def manager(sale_repo, catalog, banner):
    return FlashSaleManager(sale_repo, catalog, banner)


@pytest.fixture
def make_sale(sale_repo):
    """Create a sale; defaults to a running window (started 1h ago, ends in 1h)"""

    def _make(active=True, **fields):
        data = {
            "title": "Flash",
            "description": "desc",
            "discount": 20,
            "startDate": iso_from_now(hours=-1),
            "endDate": iso_from_now(hours=1),
            "productIds": ["p1"],
        }
        data.update(fields)
        sale = sale_repo.create(data)
        if active:
            sale = sale_repo.set_active(sale["id"], True)
        return sale

    return _make


@pytest.fixture
def app(data_dir):
    JsonStore(str(data_dir)).write(PRODUCTS_FILE, PRODUCTS)
    app = create_app({
        "DATA_DIR": str(data_dir),
        "ADMIN_API_KEY": ADMIN_HEADERS["X-Admin-Key"],
        "FLASH_SALE_SWEEPER_ENABLED": False,
        "LOG_LEVEL": "WARNING",
        "TESTING": True,
    })
    yield app
    app.extensions["flash_sale_sweeper"].stop()


@pytest.fixture
def client(app):
    return app.test_client()
