import pytest

from src.dao import FLASH_SALES_FILE, FlashSaleRepo, JsonStore, normalize_product_ids


def _payload(**overrides):
    data = {
        "title": "Soldes",
        "description": "Tout doit partir",
        "discount": "25",
        "startDate": "2030-01-01T00:00:00Z",
        "endDate": "2030-01-02T00:00:00Z",
        "productIds": [1, "p2"],
    }
    data.update(overrides)
    return data


def test_get_all_initializes_missing_file(tmp_path):
    store = JsonStore(str(tmp_path))
    repo = FlashSaleRepo(store)

    assert repo.get_all() == []
    assert store.exists(FLASH_SALES_FILE)


def test_create_forces_inactive_and_normalizes(sale_repo):
    sale = sale_repo.create(_payload(isActive=True))

    assert sale["isActive"] is False
    assert sale["discount"] == 25
    assert sale["productIds"] == ["1", "p2"]
    assert sale["order"] == 1
    assert sale["createdAt"].endswith("Z")
    assert sale_repo.get_by_id(sale["id"]) == sale


def test_create_accepts_mapping_of_product_ids(sale_repo):
    sale = sale_repo.create(_payload(productIds={"0": 3, "1": "p1", "2": "p1"}))
    assert sale["productIds"] == ["3", "p1", "p1"]


def test_created_ids_are_unique(sale_repo):
    ids = {sale_repo.create(_payload())["id"] for _ in range(5)}
    assert len(ids) == 5


def test_update_merges_shallowly_and_keeps_identity(sale_repo):
    sale = sale_repo.create(_payload())
    updated = sale_repo.update(sale["id"], {
        "title": "Nouveau",
        "productIds": {"a": 9},
        "order": "3",
        "id": "hijack",
        "createdAt": "1970-01-01T00:00:00Z",
    })

    assert updated["title"] == "Nouveau"
    assert updated["description"] == "Tout doit partir"
    assert updated["productIds"] == ["9"]
    assert updated["order"] == 3
    assert updated["id"] == sale["id"]
    assert updated["createdAt"] == sale["createdAt"]
    assert sale_repo.get_by_id(sale["id"]) == updated


def test_unknown_id_returns_not_found_without_writing(sale_repo, store):
    sale_repo.create(_payload())
    before = store.path_for(FLASH_SALES_FILE).read_text()

    assert sale_repo.update("nope", {"title": "x"}) is None
    assert sale_repo.set_active("nope", True) is None
    assert sale_repo.delete("nope") is False
    assert store.path_for(FLASH_SALES_FILE).read_text() == before


def test_delete_removes_record(sale_repo):
    keep = sale_repo.create(_payload())
    gone = sale_repo.create(_payload())

    assert sale_repo.delete(gone["id"]) is True
    assert [s["id"] for s in sale_repo.get_all()] == [keep["id"]]


def test_normalize_product_ids_rejects_scalars():
    assert normalize_product_ids(None) == []
    assert normalize_product_ids(("a", 2)) == ["a", "2"]
    with pytest.raises(ValueError):
        normalize_product_ids("p1")


def test_update_refuses_to_clear_discount(sale_repo):
    sale = sale_repo.create(_payload())

    with pytest.raises(ValueError):
        sale_repo.update(sale["id"], {"discount": None})
    assert sale_repo.get_by_id(sale["id"])["discount"] == 25
