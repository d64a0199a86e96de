"""Flash Sales Module - lifecycle, banner projection, sweeper and HTTP routes"""

from .routes import flash_bp
from .flash_sale_manager import FlashSaleManager
from .banner import BannerBuilder
from .sweeper import FlashSaleSweeper
from .rate_limiter import RateLimiter
from .errors import FlashSaleNotFoundError, ValidationError

__all__ = [
    'flash_bp',
    'FlashSaleManager',
    'BannerBuilder',
    'FlashSaleSweeper',
    'RateLimiter',
    'FlashSaleNotFoundError',
    'ValidationError',
]
