"""
Retail Dashboard REST API.

Run with:
    uvicorn retail_api.service:create_app --factory --reload --port 3000
or:
    retail-api serve
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .inventory import InventoryStore
from .results import ErrorKind, StoreError
from .schemas import PurchaseRequest, ReviewRequest, StockRequest, dump
from .storage import JsonFileStorage, ProductStorage

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INSUFFICIENT_STOCK: 409,
    ErrorKind.STORAGE_UNAVAILABLE: 500,
}


def error_response(
    status_code: int, message: str, headers: Optional[Dict[str, str]] = None, **extra: Any
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
        headers=headers,
    )


def failure_response(error: StoreError) -> JSONResponse:
    """Translate a store error into its HTTP response."""
    return error_response(STATUS_BY_KIND[error.kind], error.message, **error.details)


def create_app(settings: Optional[Settings] = None, storage: Optional[ProductStorage] = None) -> FastAPI:
    settings = settings or load_settings()
    store = InventoryStore(storage or JsonFileStorage(settings.data_file))

    app = FastAPI(title=settings.server_name, version="1.0.0")
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount images directory
    if settings.images_dir.exists():
        app.mount("/images", StaticFiles(directory=str(settings.images_dir)), name="images")
    else:
        logger.warning("Images directory %s not found; /images is disabled", settings.images_dir)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return error_response(400, "Invalid request body")

    # Generic exception handler to ensure JSON responses on uncaught exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        tb = traceback.format_exc()
        logger.error(f"Unhandled exception for request {request.url}:\n{tb}")
        return error_response(500, "Server error")

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return f"{settings.server_name} is running!"

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/products")
    def list_products():
        """Get all products in document order."""
        result = store.list_products()
        if not result.ok:
            return failure_response(result.error)
        products = [dump(p) for p in result.value]
        return {"success": True, "count": len(products), "data": products}

    @app.get("/products/{product_id}")
    def get_product(product_id: str):
        """Get a single product by ID."""
        result = store.get_product(product_id)
        if not result.ok:
            return failure_response(result.error)
        return {"success": True, "data": dump(result.value)}

    @app.get("/api/products/{product_id}/reviews")
    def list_reviews(product_id: str):
        """Get reviews for a product."""
        result = store.list_reviews(product_id)
        if not result.ok:
            return failure_response(result.error)
        return {"success": True, "reviews": [dump(r) for r in result.value]}

    @app.post("/api/products/{product_id}/reviews")
    def add_review(product_id: str, body: ReviewRequest):
        """Add a review for a product and refresh its average rating."""
        result = store.add_review(product_id, body.user, body.rating, body.comment)
        if not result.ok:
            return failure_response(result.error)
        receipt = result.value
        return {
            "success": True,
            "review": dump(receipt.review),
            "newAverageRating": receipt.new_average_rating,
        }

    @app.post("/api/products/{product_id}/stock")
    def adjust_stock(product_id: str, body: StockRequest):
        """Add units to a product's stock."""
        result = store.adjust_stock(product_id, body.amount)
        if not result.ok:
            return failure_response(result.error)
        return {
            "success": True,
            "message": "Stock updated successfully",
            "productId": int(product_id),
            "newStock": result.value,
        }

    @app.post("/api/purchase")
    def purchase(body: PurchaseRequest):
        """Process a purchase: all cart lines are fulfilled or none are."""
        result = store.purchase(body.cart_items, body.customer_info, body.total)
        if not result.ok:
            return failure_response(result.error)
        receipt = result.value
        return {
            "success": True,
            "message": "Purchase completed successfully",
            "order": dump(receipt.order),
            "updatedProducts": [dump(u) for u in receipt.updated_products],
        }

    @app.get("/time")
    def current_time():
        now = datetime.now(timezone.utc)
        return {
            "time": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "server": settings.server_name,
        }

    @app.post("/echo")
    def echo(data: Any = Body(None)):
        logger.info("Received POST at /echo: %s", data)
        return {"received": True, "data": data, "message": "Data received successfully"}

    return app


def endpoint_summary(base_url: str) -> Dict[str, str]:
    """Human-facing endpoint list printed when the server starts."""
    return {
        "Server": base_url,
        "Products API": f"{base_url}/products",
        "Time API": f"{base_url}/time",
    }
