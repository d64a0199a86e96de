from typing import Any, Dict, List, Optional
import logging

from ..dao import FlashSale, FlashSaleRepo, ProductRepo
from ..observability import EXPIRED_REMOVED
from .banner import BannerBuilder
from .lifecycle import Clock, active_sales, is_effectively_active, is_expired, utc_now

logger = logging.getLogger(__name__)


class FlashSaleManager:
    """Lifecycle of flash sales: activation, expiry and banner upkeep.

    Only the `isActive` flag is stored. Whether a sale is running is always
    recomputed from the clock, so several sales may be running at once.
    """

    def __init__(self, repo: FlashSaleRepo, catalog: ProductRepo, banner: BannerBuilder, now: Clock = utc_now):
        self.repo = repo
        self.catalog = catalog
        self.banner = banner
        self.now = now

    # --- reads ---
    def get_all_flash_sales(self) -> List[FlashSale]:
        return self.repo.get_all()

    def get_flash_sale(self, sale_id: str) -> Optional[FlashSale]:
        return self.repo.get_by_id(sale_id)

    def get_active_flash_sale(self) -> Optional[FlashSale]:
        """First running sale in storage order, after purging expired ones"""
        self.clean_expired_flash_sales()
        now = self.now()
        for sale in self.repo.get_all():
            if is_effectively_active(sale, now):
                return sale
        return None

    def get_active_flash_sales(self) -> List[FlashSale]:
        """All running sales ordered by `order` (missing order sorts last)"""
        return active_sales(self.repo.get_all(), self.now())

    def get_flash_sale_products(self, sale_id: str) -> Optional[List[Dict[str, Any]]]:
        """Catalog products referenced by a sale, or None if the sale is unknown"""
        sale = self.repo.get_by_id(sale_id)
        if sale is None:
            return None
        wanted = {str(pid) for pid in sale.get("productIds") or []}
        return [p for p in self.catalog.get_all_products() if str(p.get("id")) in wanted]

    # --- writes ---
    def create_flash_sale(self, data: Dict[str, Any]) -> FlashSale:
        sale = self.repo.create(data)
        self._warn_unknown_products(sale)
        return sale

    def update_flash_sale(self, sale_id: str, changes: Dict[str, Any]) -> Optional[FlashSale]:
        sale = self.repo.update(sale_id, changes)
        if sale is not None and "productIds" in changes:
            self._warn_unknown_products(sale)
        return sale

    def delete_flash_sale(self, sale_id: str) -> bool:
        """Delete permanently; the banner is rebuilt so it drops the sale"""
        removed = self.repo.delete(sale_id)
        if removed:
            self.banner.generate_banniere_flash_sale()
        return removed

    def activate(self, sale_id: str) -> Optional[FlashSale]:
        # The date window is not checked here; other active sales are left alone
        sale = self.repo.set_active(sale_id, True)
        if sale is None:
            return None
        logger.info("Activated flash sale id=%s", sale_id)
        self.banner.generate_banniere_flash_sale()
        return sale

    def deactivate(self, sale_id: str) -> Optional[FlashSale]:
        sale = self.repo.set_active(sale_id, False)
        if sale is None:
            return None
        logger.info("Deactivated flash sale id=%s", sale_id)
        self.banner.generate_banniere_flash_sale()
        return sale

    def clean_expired_flash_sales(self) -> bool:
        """Delete every sale whose endDate has passed, active or not.

        Returns True when at least one sale was removed.
        """
        sales = self.repo.get_all()
        now = self.now()
        kept = [s for s in sales if not is_expired(s, now)]
        removed = len(sales) - len(kept)
        if not removed:
            return False
        self.repo.replace_all(kept)
        EXPIRED_REMOVED.inc(removed)
        logger.info("Removed %d expired flash sales", removed)
        self.banner.generate_banniere_flash_sale()
        return True

    def _warn_unknown_products(self, sale: FlashSale) -> List[str]:
        # Saved anyway; the banner skips ids missing from the catalog
        unknown = [pid for pid in sale.get("productIds") or [] if self.catalog.get_product(pid) is None]
        if unknown:
            logger.warning("Flash sale %s references unknown products %s", sale.get("id"), unknown)
        return unknown

    # Names used by the storefront API
    def generate_banniere_flash_sale(self) -> List[Dict[str, Any]]:
        return self.banner.generate_banniere_flash_sale()

    def get_banniere_products(self) -> List[Dict[str, Any]]:
        return self.banner.get_banniere_products()
