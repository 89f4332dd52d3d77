"""
Records produced by extraction and by the cart actions. Built fresh per
operation and never persisted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional


class _Record:
    def to_dict(self) -> dict:
        return asdict(self)  # type: ignore[call-overload]


@dataclass
class ProductSummary(_Record):
    asin: str
    title: str
    price: str
    is_prime_eligible: bool = False
    is_sponsored: bool = False
    url: Optional[str] = None


@dataclass
class ReviewSummary(_Record):
    average_rating: Optional[float] = None
    reviews_count: Optional[int] = None


@dataclass
class ProductDetail(_Record):
    asin: str
    title: str
    price: Optional[str]
    reviews: ReviewSummary = field(default_factory=ReviewSummary)
    can_use_subscribe_and_save: bool = False
    main_image_url: Optional[str] = None
    main_image_base64: Optional[str] = None


@dataclass
class CartItem(_Record):
    title: str
    price: str
    quantity: int = 1
    image: Optional[str] = None
    product_url: Optional[str] = None
    asin: Optional[str] = None
    availability: str = "Unknown"
    is_selected: bool = False


@dataclass
class CartContent(_Record):
    is_empty: bool
    items: list[CartItem] = field(default_factory=list)
    subtotal: Optional[str] = None
    total_items: Optional[int] = None


@dataclass
class DeliveryAddress(_Record):
    name: str = ""
    address: str = ""
    country: str = ""


@dataclass
class OrderInfo(_Record):
    order_number: str
    order_date: str
    total: str
    status: str
    collection_date: Optional[str] = None
    delivery_address: DeliveryAddress = field(default_factory=DeliveryAddress)


@dataclass
class OrderItem(_Record):
    title: str
    image: Optional[str] = None
    product_url: Optional[str] = None
    asin: Optional[str] = None
    return_eligible: bool = False
    return_date: Optional[str] = None


@dataclass
class OrderHistoryEntry(_Record):
    order_info: OrderInfo
    items: list[OrderItem] = field(default_factory=list)


@dataclass
class AddToCartResult(_Record):
    success: bool
    message: str
    asin: str
    confirmation_text: Optional[str] = None


@dataclass
class ClearCartResult(_Record):
    success: bool
    message: str
    items_observed: int
    items_removed: int
    failures: int = 0

    @property
    def partial(self) -> bool:
        return self.items_removed < self.items_observed
