"""
Analytics Input Records

Immutable snapshots of the catalog and order rows the engine reads. The
record access port builds them; the calculators only ever consume them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple, Union


@dataclass(frozen=True)
class ProductRecord:
    """Catalog entry with its lifetime counters"""
    id: str
    name: str
    category: str
    price: Decimal
    created_at: datetime
    stock: int = 0
    views: int = 0
    add_to_cart_count: int = 0
    total_sold: int = 0
    image: Optional[str] = None


@dataclass(frozen=True)
class OrderLine:
    """Order line item with the category of its product, if still known"""
    product_id: Optional[str]
    quantity: int
    price: Decimal
    product_name: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class OrderRecord:
    """Customer order with reconciled amounts and line items"""
    id: str
    order_number: str
    created_at: datetime
    status: str
    delivery_type: str
    total_amount: Decimal
    phone: str
    original_amount: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    user_id: Optional[str] = None
    customer_name: Optional[str] = None
    address: Optional[str] = None
    items: Tuple[OrderLine, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RevenueTotals:
    """Summed order amounts for a set of orders"""
    gross: Decimal = Decimal("0")
    original: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.original - self.discount


@dataclass(frozen=True)
class DailyTotal:
    """Revenue and order count of one calendar day"""
    day: date
    revenue: Decimal
    order_count: int


# =============================================================================
# CUSTOMER IDENTITY
# =============================================================================

@dataclass(frozen=True)
class Identified:
    """Customer with a storefront account"""
    user_id: str


@dataclass(frozen=True)
class Guest:
    """Customer who checked out without an account, known by phone"""
    phone: str


CustomerIdentity = Union[Identified, Guest]

GUEST_USER_ID = "guest"


def customer_identity(user_id: Optional[str], phone: Optional[str]) -> CustomerIdentity:
    """Classify an order's customer reference."""
    if user_id and user_id.strip() and user_id.strip().lower() != GUEST_USER_ID:
        return Identified(user_id.strip())
    return Guest((phone or "").strip())


def count_unique_customers(keys: Iterable[Tuple[Optional[str], Optional[str]]]) -> int:
    """
    Count distinct customers among (user_id, phone) pairs.

    Account holders are deduplicated by account, guests by phone number.
    Two guest orders with the same phone count as one customer.
    """
    return len({customer_identity(user_id, phone) for user_id, phone in keys})
