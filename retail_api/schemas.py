from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Review(BaseModel):
    id: int
    user: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    date: str


class Product(BaseModel):
    # Unknown keys (description, image, ...) survive a rewrite of the document.
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    price: Union[int, float]
    stock: int = Field(..., ge=0)
    rating: Union[int, float] = 0
    reviews: List[Review] = Field(default_factory=list)


class OrderItem(BaseModel):
    id: int
    name: str
    quantity: int
    price: Union[int, float]
    subtotal: float


class OrderSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="orderId")
    date: str
    items: List[OrderItem]
    total: Any = None
    customer: Any = None


class StockUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId")
    name: str
    previous_stock: int = Field(..., alias="previousStock")
    new_stock: int = Field(..., alias="newStock")


class Shortage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId")
    name: str
    requested: int
    available: int


class PurchaseReceipt(BaseModel):
    order: OrderSummary
    updated_products: List[StockUpdate]


class ReviewReceipt(BaseModel):
    review: Review
    new_average_rating: float


# Request bodies are loosely typed; field checks live in the inventory store
# so that bad input surfaces as InvalidRequest rather than a schema error.
class PurchaseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cart_items: Any = Field(None, alias="cartItems")
    customer_info: Optional[Any] = Field(None, alias="customerInfo")
    total: Optional[Any] = None


class ReviewRequest(BaseModel):
    user: Any = None
    rating: Any = None
    comment: Any = None


class StockRequest(BaseModel):
    amount: Any = None


def dump(model: BaseModel) -> Dict[str, Any]:
    """Serialize a model the way it is written to clients and to disk."""

    return model.model_dump(mode="json", by_alias=True)
