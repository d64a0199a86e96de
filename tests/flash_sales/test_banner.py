import pytest

from conftest import iso_from_now
from src.dao import BANNIERE_FILE, PRODUCTS_FILE
from src.flash_sales.banner import BannerBuilder, flash_price


@pytest.mark.parametrize("price, discount, expected", [
    (100, 20, 80.0),
    (19.99, 15, 16.99),
    (50, 0, 50.0),
    (50, 100, 0.0),
    # exact half-cent ties round up
    (10.25, 50, 5.13),
    (0.25, 50, 0.13),
])
def test_flash_price(price, discount, expected):
    assert flash_price(price, discount) == expected


def test_no_active_sale_writes_empty_banner(banner, store, make_sale):
    store.write(BANNIERE_FILE, [{"stale": True}])
    make_sale(active=False)

    assert banner.generate_banniere_flash_sale() == []
    assert store.read(BANNIERE_FILE) == []


def test_banner_product_overlays_sale_fields(banner, make_sale):
    sale = make_sale(
        discount=20,
        productIds=[" p1 "],
        order=2,
        backgroundColor="#ff0000",
        icon="zap",
        emoji="⚡",
    )

    [item] = banner.generate_banniere_flash_sale()

    assert item["id"] == "p1"
    assert item["name"] == "Robe wax"
    assert item["price"] == 100
    assert item["originalFlashPrice"] == 100
    assert item["flashSalePrice"] == 80.0
    assert item["flashSaleId"] == sale["id"]
    assert item["flashSaleDiscount"] == 20
    assert item["flashSaleTitle"] == sale["title"]
    assert item["flashSaleDescription"] == sale["description"]
    assert item["flashSaleStartDate"] == sale["startDate"]
    assert item["flashSaleEndDate"] == sale["endDate"]
    assert item["flashSaleBackgroundColor"] == "#ff0000"
    assert item["flashSaleIcon"] == "zap"
    assert item["flashSaleEmoji"] == "⚡"
    assert item["flashSaleOrder"] == 2


def test_same_product_in_two_sales_appears_twice(banner, make_sale):
    second = make_sale(title="B", discount=50, order=2, productIds=["p1"])
    first = make_sale(title="A", discount=10, order=1, productIds=["p1"])

    items = banner.generate_banniere_flash_sale()

    assert [(i["id"], i["flashSaleId"]) for i in items] == [("p1", first["id"]), ("p1", second["id"])]
    assert [i["flashSalePrice"] for i in items] == [90.0, 50.0]


def test_dangling_product_ids_are_skipped(banner, make_sale):
    make_sale(productIds=["ghost", "p3", "p1", "p1"])

    items = banner.generate_banniere_flash_sale()

    # duplicates within a sale are kept, unknown ids dropped
    assert [i["id"] for i in items] == ["p3", "p1", "p1"]


def test_generation_is_idempotent(banner, store, make_sale):
    make_sale(productIds=["p1", "p2"])
    make_sale(order=3, productIds=["p3"])

    banner.generate_banniere_flash_sale()
    first = store.path_for(BANNIERE_FILE).read_bytes()
    banner.generate_banniere_flash_sale()

    assert store.path_for(BANNIERE_FILE).read_bytes() == first


def test_get_banniere_products_always_recomputes(banner, store, make_sale):
    make_sale(productIds=["p1"])
    assert len(banner.get_banniere_products()) == 1

    products = store.read(PRODUCTS_FILE)
    products[0]["price"] = 200
    store.write(PRODUCTS_FILE, products)

    assert banner.get_banniere_products()[0]["flashSalePrice"] == 160.0


def test_corrupt_catalog_empties_banner(banner, store, make_sale):
    make_sale(productIds=["p1"])
    banner.generate_banniere_flash_sale()
    store.path_for(PRODUCTS_FILE).write_text("[oops", encoding="utf-8")

    assert banner.generate_banniere_flash_sale() == []
    assert store.read(BANNIERE_FILE) == []


def test_preserve_on_error_keeps_last_banner(store, sale_repo, catalog, make_sale):
    builder = BannerBuilder(store, sale_repo, catalog, preserve_on_error=True)
    make_sale(productIds=["p1"])
    good = builder.generate_banniere_flash_sale()
    store.path_for(PRODUCTS_FILE).write_text("[oops", encoding="utf-8")

    assert builder.generate_banniere_flash_sale() == good
    assert store.read(BANNIERE_FILE) == good


def test_banner_respects_window_even_when_flag_set(banner, make_sale):
    make_sale(startDate=iso_from_now(hours=2), endDate=iso_from_now(hours=3))
    assert banner.generate_banniere_flash_sale() == []
