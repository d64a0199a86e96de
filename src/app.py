from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from flask import Flask, g, jsonify, request

from .config import load_config
from .dao import FlashSaleRepo, JsonStore
from .flash_sales import BannerBuilder, FlashSaleManager, FlashSaleSweeper, RateLimiter, flash_bp
from .flash_sales.pipeline import LIMITER_EXTENSION
from .flash_sales.routes import MANAGER_EXTENSION
from .observability import HTTP_LATENCY, HTTP_REQUESTS, configure_logging, metrics_endpoint
from .product_repo import JsonProductRepo

SWEEPER_EXTENSION = "flash_sale_sweeper"

logger = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """Build the Flask app and wire the flash sale services onto it.

    The app owns every stateful piece (limiter, sweeper); nothing is a
    module-level singleton. The sweeper is only started here when
    FLASH_SALE_SWEEPER_ENABLED is set; src.main starts it explicitly.
    Under a WSGI server (gunicorn "src.app:create_app()") set
    FLASH_SALE_SWEEPER_ENABLED=1, otherwise expired sales are only purged
    when /active is read. With several workers, enable it in one only.
    """
    settings = load_config(config)
    configure_logging(getattr(logging, settings["LOG_LEVEL"], logging.INFO))

    app = Flask(__name__)
    app.config.update(settings)
    app.secret_key = settings["SECRET_KEY"]

    store = JsonStore(settings["DATA_DIR"])
    sales = FlashSaleRepo(store)
    catalog = JsonProductRepo(store)
    banner = BannerBuilder(store, sales, catalog, preserve_on_error=settings["BANNER_PRESERVE_ON_ERROR"])
    manager = FlashSaleManager(sales, catalog, banner)

    app.extensions[MANAGER_EXTENSION] = manager
    app.extensions[LIMITER_EXTENSION] = RateLimiter(
        max_requests=settings["RATE_LIMIT_MAX_REQUESTS"],
        window_seconds=settings["RATE_LIMIT_WINDOW_SECONDS"],
    )
    sweeper = FlashSaleSweeper(manager, interval_seconds=settings["FLASH_SALE_SWEEP_SECONDS"])
    app.extensions[SWEEPER_EXTENSION] = sweeper

    app.register_blueprint(flash_bp)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.get("/metrics")
    def metrics():
        return metrics_endpoint()

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def record_request(response):
        endpoint = request.url_rule.rule if request.url_rule else "unmatched"
        started = g.pop("request_started", None)
        if started is not None:
            HTTP_LATENCY.labels(endpoint).observe(time.perf_counter() - started)
        HTTP_REQUESTS.labels(request.method, endpoint, str(response.status_code)).inc()
        return response

    if settings["FLASH_SALE_SWEEPER_ENABLED"]:
        sweeper.start()

    logger.info("App created data_dir=%s", settings["DATA_DIR"])
    return app
