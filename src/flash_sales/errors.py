from typing import List, Optional


class FlashSaleNotFoundError(Exception):
    """Raised when a flash sale id does not exist"""

    def __init__(self, sale_id: str):
        super().__init__(f"Flash sale {sale_id} not found")
        self.sale_id = sale_id


class ValidationError(Exception):
    """Raised when a create/update payload is rejected"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []
