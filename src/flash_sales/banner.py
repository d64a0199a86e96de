from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from ..dao import BANNIERE_FILE, FlashSaleRepo, JsonStore, ProductRepo
from ..observability import BANNER_GENERATIONS, BANNER_LATENCY
from .lifecycle import Clock, active_sales, utc_now

logger = logging.getLogger(__name__)

BannerProduct = Dict[str, Any]


def flash_price(price: Any, discount: Any) -> float:
    """Discounted price rounded half-up to 2 decimals, e.g. (100, 20) -> 80.0

    Ties are decided on the exact value of the float product, so 10.25 at
    50% gives 5.13 where round() would give 5.12.
    """
    raw = float(price) * (1 - float(discount) / 100)
    return float(Decimal(raw).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def build_banner_product(product: Dict[str, Any], sale: Dict[str, Any]) -> BannerProduct:
    return {
        **product,
        "flashSaleId": sale.get("id"),
        "flashSaleDiscount": sale.get("discount"),
        "flashSaleStartDate": sale.get("startDate"),
        "flashSaleEndDate": sale.get("endDate"),
        "flashSaleTitle": sale.get("title"),
        "flashSaleDescription": sale.get("description"),
        "flashSaleBackgroundColor": sale.get("backgroundColor"),
        "flashSaleIcon": sale.get("icon"),
        "flashSaleEmoji": sale.get("emoji"),
        "flashSaleOrder": sale.get("order"),
        "originalFlashPrice": product.get("price"),
        "flashSalePrice": flash_price(product.get("price"), sale.get("discount")),
    }


class BannerBuilder:
    """Regenerates banniereflashsale.json from active sales x catalog.

    The file is a pure projection: every call rebuilds it from scratch and
    overwrites it whole. On any failure the banner is emptied, unless
    `preserve_on_error` is set, in which case the previous file is kept.
    """

    def __init__(
        self,
        store: JsonStore,
        sales: FlashSaleRepo,
        catalog: ProductRepo,
        now: Clock = utc_now,
        preserve_on_error: bool = False,
    ):
        self.store = store
        self.sales = sales
        self.catalog = catalog
        self.now = now
        self.preserve_on_error = preserve_on_error
        self.store.ensure_file(BANNIERE_FILE, [])

    def generate_banniere_flash_sale(self) -> List[BannerProduct]:
        with BANNER_LATENCY.time():
            try:
                banner = self._build()
                self.store.write(BANNIERE_FILE, banner)
            except Exception:
                logger.exception("Banner generation failed")
                BANNER_GENERATIONS.labels(outcome="error").inc()
                return self._on_error()
        BANNER_GENERATIONS.labels(outcome="ok").inc()
        logger.info("Banner regenerated with %d products", len(banner))
        return banner

    def get_banniere_products(self) -> List[BannerProduct]:
        # No caching: storefront reads always see the current sales and catalog
        return self.generate_banniere_flash_sale()

    def _build(self) -> List[BannerProduct]:
        sales = active_sales(self.sales.get_all(), self.now())
        if not sales:
            logger.info("No active flash sale; banner is empty")
            return []

        products = self.catalog.get_all_products()
        by_id: Dict[str, Dict[str, Any]] = {}
        for product in products:
            # first match wins, like a linear scan
            by_id.setdefault(str(product.get("id", "")).strip(), product)

        banner: List[BannerProduct] = []
        for sale in sales:
            for raw_id in sale.get("productIds") or []:
                target = str(raw_id).strip()
                product = by_id.get(target)
                if product is None:
                    logger.warning("Flash sale %s references unknown product %s", sale.get("id"), target)
                    continue
                banner.append(build_banner_product(product, sale))
        return banner

    def _on_error(self) -> List[BannerProduct]:
        if self.preserve_on_error:
            try:
                previous = self.store.read(BANNIERE_FILE, [])
                return previous if isinstance(previous, list) else []
            except Exception:
                logger.exception("Could not read previous banner")
                return []
        try:
            self.store.write(BANNIERE_FILE, [])
        except Exception:
            logger.exception("Could not empty banner after failure")
        return []
