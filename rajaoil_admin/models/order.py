from pydantic import BaseModel, ConfigDict, field_serializer, field_validator
from typing import List, Optional
from datetime import datetime
from enum import Enum

from rajaoil_admin.utils.timestamps import to_iso


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


ORDER_STATUSES = [s.value for s in OrderStatus]
PAYMENT_STATUSES = [s.value for s in PaymentStatus]


class OrderItem(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    productId: str = ""
    brand: str = ""
    name: str = ""
    price: float = 0
    image: str = ""
    quantity: int = 1
    offer: Optional[str] = None

    @field_validator("productId", "brand", "name", "image", mode="before")
    @classmethod
    def _empty_when_missing(cls, value):
        return "" if value is None else value


class DeliveryAddress(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    doorNo: str = ""
    address: str = ""
    district: str = ""
    state: str = ""
    pincode: str = ""

    @field_validator("doorNo", "address", "district", "state", "pincode", mode="before")
    @classmethod
    def _empty_when_missing(cls, value):
        return "" if value is None else value


class Order(BaseModel):
    """
    An order as stored by the checkout flow.
    `id` is the store identity, `orderId` the business identifier shown to customers (ORD-xxxxx).
    `total` is computed at checkout and never recomputed here.

    Decoding is lenient: whatever the checkout wrote is shown as is. Statuses
    outside the enums (from older builds) are kept lowercased rather than rejected;
    only writes are checked against ORDER_STATUSES / PAYMENT_STATUSES.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    orderId: str = ""
    items: List[OrderItem] = []
    total: float = 0
    customerName: str = ""
    customerPhone: str = ""
    deliveryAddress: DeliveryAddress = DeliveryAddress()
    notes: str = ""
    status: str = OrderStatus.PENDING.value
    paymentStatus: str = PaymentStatus.PENDING.value
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator("status", "paymentStatus", mode="before")
    @classmethod
    def _lowercase_status(cls, value):
        # older documents were written with capitalized values
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, str):
            value = value.strip().lower()
        return value or "pending"

    @field_validator("orderId", "customerName", "customerPhone", "notes", mode="before")
    @classmethod
    def _empty_when_missing(cls, value):
        return "" if value is None else value

    @field_validator("items", mode="before")
    @classmethod
    def _items_when_missing(cls, value):
        return value or []

    @field_validator("deliveryAddress", mode="before")
    @classmethod
    def _address_when_missing(cls, value):
        if isinstance(value, str):
            return {"address": value}
        return value or {}

    @field_validator("total", mode="before")
    @classmethod
    def _total_when_missing(cls, value):
        return value or 0

    @field_serializer("createdAt", "updatedAt")
    def _serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return to_iso(value)

    @classmethod
    def from_document(cls, raw: dict) -> "Order":
        data = dict(raw)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    paymentStatus: Optional[str] = None


class OrderStatistics(BaseModel):
    totalOrders: int = 0
    totalRevenue: float = 0
    pendingOrders: int = 0
    processingOrders: int = 0
    completedOrders: int = 0
    cancelledOrders: int = 0
    paidOrders: int = 0


class OrderDetailUpdate(BaseModel):
    """Both selectors of the order detail screen. A missing field is left unchanged."""
    status: Optional[str] = None
    paymentStatus: Optional[str] = None
