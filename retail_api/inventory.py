"""Inventory store: reads and the validate -> compute -> persist mutations.

Each operation reloads the whole collection from storage. Mutations rewrite
the whole collection and run under a single process-wide lock, so two
overlapping requests cannot both read the same pre-mutation document.
"""
from __future__ import annotations

import functools
import itertools
import logging
import math
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from .results import ErrorKind, Result
from .schemas import (
    OrderItem,
    OrderSummary,
    Product,
    PurchaseReceipt,
    Review,
    ReviewReceipt,
    Shortage,
    StockUpdate,
    dump,
)
from .storage import ProductStorage, StorageUnavailable, StorageWriteError

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _as_int(value: Any) -> Optional[int]:
    """Coerce JSON input to an int; None when it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _non_empty_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _storage_guard(func: Callable[..., Result]) -> Callable[..., Result]:
    """Turn a StorageUnavailable raised by the backend into a failed Result."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Result:
        try:
            return func(*args, **kwargs)
        except StorageUnavailable as exc:
            logger.error("%s failed: storage unavailable (%s)", func.__name__, exc)
            if isinstance(exc, StorageWriteError):
                return Result.failure(ErrorKind.STORAGE_UNAVAILABLE, "Error saving products")
            return Result.failure(ErrorKind.STORAGE_UNAVAILABLE, "Error loading products")

    return wrapper


class InventoryStore:
    """Product catalog operations over an injected storage backend."""

    def __init__(
        self,
        storage: ProductStorage,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self.storage = storage
        self.clock = clock
        self._write_lock = threading.Lock()
        self._order_seq = itertools.count(1)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @_storage_guard
    def list_products(self) -> Result[List[Product]]:
        return Result.success(self.storage.load())

    @_storage_guard
    def get_product(self, product_id: Any) -> Result[Product]:
        product = self._find(self.storage.load(), product_id)
        if product is None:
            return self._not_found(product_id)
        return Result.success(product)

    @_storage_guard
    def list_reviews(self, product_id: Any) -> Result[List[Review]]:
        product = self._find(self.storage.load(), product_id)
        if product is None:
            return self._not_found(product_id)
        return Result.success(product.reviews)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @_storage_guard
    def purchase(
        self,
        cart_items: Any,
        customer_info: Any = None,
        total: Any = None,
    ) -> Result[PurchaseReceipt]:
        """Decrement stock for every cart line, or for none of them."""
        if not isinstance(cart_items, list) or not cart_items:
            return Result.failure(ErrorKind.INVALID_REQUEST, "Cart is empty")

        lines: List[Tuple[int, int]] = []
        for item in cart_items:
            if not isinstance(item, dict):
                return Result.failure(ErrorKind.INVALID_REQUEST, "Each cart item must be an object")
            product_id = _as_int(item.get("id"))
            quantity = _as_int(item.get("quantity"))
            if product_id is None:
                return Result.failure(ErrorKind.INVALID_REQUEST, "Each cart item needs an integer id")
            if quantity is None or quantity <= 0:
                return Result.failure(
                    ErrorKind.INVALID_REQUEST,
                    f"Quantity for product {product_id} must be a positive integer",
                )
            lines.append((product_id, quantity))

        with self._write_lock:
            products = self.storage.load()
            by_id: Dict[int, Product] = {}
            for product in products:
                by_id.setdefault(product.id, product)

            for product_id, _ in lines:
                if product_id not in by_id:
                    return self._not_found(product_id)

            # Duplicate lines for one product are checked against stock together.
            requested: Dict[int, int] = {}
            for product_id, quantity in lines:
                requested[product_id] = requested.get(product_id, 0) + quantity

            shortages = [
                Shortage(
                    product_id=product_id,
                    name=by_id[product_id].name,
                    requested=quantity,
                    available=by_id[product_id].stock,
                )
                for product_id, quantity in requested.items()
                if quantity > by_id[product_id].stock
            ]
            if shortages:
                logger.warning(
                    "Purchase rejected, insufficient stock for products %s",
                    [s.product_id for s in shortages],
                )
                return Result.failure(
                    ErrorKind.INSUFFICIENT_STOCK,
                    "Insufficient stock for some products",
                    insufficientStock=[dump(s) for s in shortages],
                )

            updates: List[StockUpdate] = []
            for product_id, quantity in requested.items():
                product = by_id[product_id]
                previous = product.stock
                product.stock = previous - quantity
                updates.append(
                    StockUpdate(
                        product_id=product_id,
                        name=product.name,
                        previous_stock=previous,
                        new_stock=product.stock,
                    )
                )
            self.storage.save(products)

        now = self.clock()
        order = OrderSummary(
            order_id=f"ORD-{int(now.timestamp() * 1000)}-{next(self._order_seq):06d}",
            date=now.isoformat(),
            items=[
                OrderItem(
                    id=product_id,
                    name=by_id[product_id].name,
                    quantity=quantity,
                    price=by_id[product_id].price,
                    subtotal=round(by_id[product_id].price * quantity, 2),
                )
                for product_id, quantity in lines
            ],
            # Client-supplied total is passed through unverified.
            total=total,
            customer=customer_info,
        )
        logger.info("Purchase %s completed for %d line(s)", order.order_id, len(lines))
        return Result.success(PurchaseReceipt(order=order, updated_products=updates))

    @_storage_guard
    def add_review(self, product_id: Any, user: Any, rating: Any, comment: Any) -> Result[ReviewReceipt]:
        user_text = _non_empty_text(user)
        comment_text = _non_empty_text(comment)
        if user_text is None or comment_text is None or rating is None:
            return Result.failure(ErrorKind.INVALID_REQUEST, "User, rating and comment are required")

        score = _as_number(rating)
        if score is None or not 1 <= score <= 5:
            return Result.failure(ErrorKind.INVALID_REQUEST, "Rating must be a number between 1 and 5")

        with self._write_lock:
            products = self.storage.load()
            product = self._find(products, product_id)
            if product is None:
                return self._not_found(product_id)

            review = Review(
                id=len(product.reviews) + 1,
                user=user_text,
                rating=int(score),
                comment=comment_text,
                date=self.clock().date().isoformat(),
            )
            product.reviews.append(review)
            product.rating = sum(r.rating for r in product.reviews) / len(product.reviews)
            self.storage.save(products)

        logger.info("Review %d added to product %d", review.id, product.id)
        return Result.success(ReviewReceipt(review=review, new_average_rating=product.rating))

    @_storage_guard
    def adjust_stock(self, product_id: Any, amount: Any) -> Result[int]:
        """Increase stock by a positive whole amount."""
        # Integers stay exact; only floats and numeric strings go through float.
        units = _as_int(amount)
        if units is None:
            number = _as_number(amount)
            if number is not None and number.is_integer():
                units = int(number)
            elif number is not None and number > 0:
                return Result.failure(ErrorKind.INVALID_REQUEST, "Amount must be a whole number of units")
        if units is None or units <= 0:
            return Result.failure(ErrorKind.INVALID_REQUEST, "Amount must be a positive number")

        with self._write_lock:
            products = self.storage.load()
            product = self._find(products, product_id)
            if product is None:
                return self._not_found(product_id)
            product.stock += units
            self.storage.save(products)

        logger.info("Stock for product %d adjusted by %d to %d", product.id, units, product.stock)
        return Result.success(product.stock)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _find(products: List[Product], product_id: Any) -> Optional[Product]:
        target = _as_int(product_id)
        if target is None:
            return None
        return next((p for p in products if p.id == target), None)

    @staticmethod
    def _not_found(product_id: Any) -> Result:
        target = _as_int(product_id)
        return Result.failure(
            ErrorKind.NOT_FOUND,
            f"Product with id {product_id} not found",
            productId=product_id if target is None else target,
        )
