from typing import Any, Dict, List, Optional

from .dao import PRODUCTS_FILE, JsonStore, ProductRepo


class JsonProductRepo(ProductRepo):
    """Catalog backed by products.json (read-only for flash sales)"""

    def __init__(self, store: JsonStore):
        self.store = store

    def get_all_products(self) -> List[Dict[str, Any]]:
        """Get every product record in file order"""
        products = self.store.read(PRODUCTS_FILE, [])
        return products if isinstance(products, list) else []

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Get a product by id, comparing trimmed string forms"""
        target = str(product_id).strip()
        for product in self.get_all_products():
            if str(product.get("id", "")).strip() == target:
                return product
        return None
