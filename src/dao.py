from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


logger = logging.getLogger(__name__)

FlashSale = Dict[str, Any]

FLASH_SALES_FILE = "flash-sales.json"
PRODUCTS_FILE = "products.json"
BANNIERE_FILE = "banniereflashsale.json"

# Never taken from an update payload
IMMUTABLE_FIELDS = ("id", "createdAt")


class StoreError(Exception):
    """Raised when a data file cannot be read, parsed or written"""
    pass


class JsonStore:
    """Flat-file JSON store: one file per collection inside `data_dir`.

    Every read parses the whole file and every write replaces it. Writes go
    through a temp file + rename so a reader never sees a truncated file.
    """

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.data_dir / filename

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).exists()

    def ensure_file(self, filename: str, default: Any = None) -> None:
        if not self.exists(filename):
            self.write(filename, [] if default is None else default)

    def read(self, filename: str, default: Any = None) -> Any:
        """Return parsed content, creating the file with `default` if absent."""
        if default is None:
            default = []
        path = self.path_for(filename)
        if not path.exists():
            self.write(filename, default)
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to read %s: %s", filename, e)
            raise StoreError(f"Could not read {filename}: {e}") from e

    def write(self, filename: str, data: Any) -> None:
        path = self.path_for(filename)
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{filename}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write %s: %s", filename, e)
            raise StoreError(f"Could not write {filename}: {e}") from e


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_product_ids(value: Any) -> List[str]:
    """Coerce a list, or a mapping of values, into a list of string ids.

    Duplicates and order are kept. Raises ValueError for any other shape.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        value = list(value.values())
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    raise ValueError("productIds must be a list or an object")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"not an integer: {value!r}")
        return int(value)
    return int(str(value).strip())


class ProductRepo:
    """Read-only product catalog used by the flash sale engine.

    Expected methods:
      - get_all_products() -> list of product dicts (at least id, price)
      - get_product(id) -> product dict or None
    """

    def get_all_products(self) -> List[Dict[str, Any]]:  # pragma: no cover - implemented by JsonProductRepo
        raise NotImplementedError

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:  # pragma: no cover
        raise NotImplementedError


class FlashSaleRepo:
    """CRUD over the `flash-sales.json` collection."""

    def __init__(self, store: JsonStore):
        self.store = store
        self.store.ensure_file(FLASH_SALES_FILE, [])

    def get_all(self) -> List[FlashSale]:
        data = self.store.read(FLASH_SALES_FILE, [])
        if not isinstance(data, list):
            logger.warning("%s does not hold a list; treating as empty", FLASH_SALES_FILE)
            return []
        return data

    def get_by_id(self, sale_id: str) -> Optional[FlashSale]:
        for sale in self.get_all():
            if sale.get("id") == sale_id:
                return sale
        return None

    def replace_all(self, sales: Iterable[FlashSale]) -> None:
        self.store.write(FLASH_SALES_FILE, list(sales))

    def create(self, data: Dict[str, Any]) -> FlashSale:
        sales = self.get_all()
        order = data.get("order")
        sale: FlashSale = {
            "id": self._new_id(sales),
            "title": data.get("title"),
            "description": data.get("description"),
            "discount": _to_int(data.get("discount")),
            "startDate": data.get("startDate"),
            "endDate": data.get("endDate"),
            "productIds": normalize_product_ids(data.get("productIds")),
            "isActive": False,
            "order": 1 if order is None else _to_int(order),
            "backgroundColor": data.get("backgroundColor"),
            "icon": data.get("icon"),
            "emoji": data.get("emoji"),
            "createdAt": utc_now_iso(),
        }
        sales.append(sale)
        self.replace_all(sales)
        logger.info("Created flash sale id=%s title=%s", sale["id"], sale["title"])
        return sale

    def update(self, sale_id: str, changes: Dict[str, Any]) -> Optional[FlashSale]:
        sales = self.get_all()
        for index, sale in enumerate(sales):
            if sale.get("id") != sale_id:
                continue
            changes = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}
            if "productIds" in changes:
                changes["productIds"] = normalize_product_ids(changes["productIds"])
            if changes.get("order") is not None:
                changes["order"] = _to_int(changes["order"])
            if "discount" in changes:
                changes["discount"] = _to_int(changes["discount"])
            updated = {**sale, **changes}
            sales[index] = updated
            self.replace_all(sales)
            logger.info("Updated flash sale id=%s fields=%s", sale_id, sorted(changes))
            return updated
        return None

    def set_active(self, sale_id: str, active: bool) -> Optional[FlashSale]:
        sales = self.get_all()
        for sale in sales:
            if sale.get("id") == sale_id:
                sale["isActive"] = active
                self.replace_all(sales)
                return sale
        return None

    def delete(self, sale_id: str) -> bool:
        sales = self.get_all()
        remaining = [s for s in sales if s.get("id") != sale_id]
        if len(remaining) == len(sales):
            return False
        self.replace_all(remaining)
        logger.info("Deleted flash sale id=%s", sale_id)
        return True

    # --- helpers ---
    @staticmethod
    def _new_id(sales: List[FlashSale]) -> str:
        taken = {str(s.get("id")) for s in sales}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)
