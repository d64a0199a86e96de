from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify
from werkzeug.exceptions import HTTPException

from ..dao import StoreError
from .errors import FlashSaleNotFoundError, ValidationError
from .flash_sale_manager import FlashSaleManager
from .pipeline import RequestContext, admin_pipeline, json_error, public_pipeline
from .schemas import validate_create, validate_update

logger = logging.getLogger(__name__)

MANAGER_EXTENSION = "flash_sales"

flash_bp = Blueprint("flash_sales", __name__, url_prefix="/api/flash-sales")


def get_manager() -> FlashSaleManager:
    return current_app.extensions[MANAGER_EXTENSION]


# Public storefront endpoints


@flash_bp.get("/active-all")
@public_pipeline
def active_all(ctx: RequestContext):
    sales = get_manager().get_active_flash_sales()
    if not sales:
        return json_error(404, "Not Found", "No active flash sale")
    return jsonify(sales)


@flash_bp.get("/banniere-products")
@public_pipeline
def banniere_products(ctx: RequestContext):
    return jsonify(get_manager().get_banniere_products())


@flash_bp.get("/active")
@public_pipeline
def active(ctx: RequestContext):
    sale = get_manager().get_active_flash_sale()
    if sale is None:
        return json_error(404, "Not Found", "No active flash sale")
    return jsonify(sale)


@flash_bp.get("/<sale_id>")
@public_pipeline
def get_flash_sale(ctx: RequestContext):
    sale_id = ctx.view_args["sale_id"]
    sale = get_manager().get_flash_sale(sale_id)
    if sale is None:
        raise FlashSaleNotFoundError(sale_id)
    return jsonify(sale)


@flash_bp.get("/<sale_id>/products")
@public_pipeline
def get_flash_sale_products(ctx: RequestContext):
    sale_id = ctx.view_args["sale_id"]
    products = get_manager().get_flash_sale_products(sale_id)
    if products is None:
        raise FlashSaleNotFoundError(sale_id)
    return jsonify(products)


# Admin endpoints


@flash_bp.get("/", strict_slashes=False)
@admin_pipeline
def list_flash_sales(ctx: RequestContext):
    return jsonify(get_manager().get_all_flash_sales())


@flash_bp.post("/", strict_slashes=False)
@admin_pipeline
def create_flash_sale(ctx: RequestContext):
    data = validate_create(ctx.body)
    sale = get_manager().create_flash_sale(data)
    return jsonify(sale), 201


@flash_bp.put("/<sale_id>")
@admin_pipeline
def update_flash_sale(ctx: RequestContext):
    sale_id = ctx.view_args["sale_id"]
    changes = validate_update(ctx.body)
    sale = get_manager().update_flash_sale(sale_id, changes)
    if sale is None:
        raise FlashSaleNotFoundError(sale_id)
    return jsonify(sale)


@flash_bp.delete("/<sale_id>")
@admin_pipeline
def delete_flash_sale(ctx: RequestContext):
    sale_id = ctx.view_args["sale_id"]
    if not get_manager().delete_flash_sale(sale_id):
        raise FlashSaleNotFoundError(sale_id)
    return jsonify({"message": "Flash sale deleted"})


@flash_bp.post("/<sale_id>/activate")
@admin_pipeline
def activate_flash_sale(ctx: RequestContext):
    sale_id = ctx.view_args["sale_id"]
    sale = get_manager().activate(sale_id)
    if sale is None:
        raise FlashSaleNotFoundError(sale_id)
    return jsonify(sale)


@flash_bp.post("/<sale_id>/deactivate")
@admin_pipeline
def deactivate_flash_sale(ctx: RequestContext):
    sale_id = ctx.view_args["sale_id"]
    sale = get_manager().deactivate(sale_id)
    if sale is None:
        raise FlashSaleNotFoundError(sale_id)
    return jsonify(sale)


# JSON error handlers: every error is {error, message[, details]}
@flash_bp.errorhandler(FlashSaleNotFoundError)
def not_found_handler(err):
    return json_error(404, "Not Found", "Flash sale not found", sale_id=err.sale_id)


@flash_bp.errorhandler(ValidationError)
def validation_handler(err):
    return json_error(400, "Bad Request", str(err), details=err.errors)


@flash_bp.errorhandler(HTTPException)
def http_error_handler(err):
    return json_error(err.code or 500, err.name, err.description)


@flash_bp.errorhandler(StoreError)
@flash_bp.errorhandler(Exception)
def internal_error_handler(err):
    logger.exception("Flash sale request failed")
    return json_error(500, "Internal Server Error", "Flash sale operation failed", details=str(err))
