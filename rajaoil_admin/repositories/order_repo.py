"""
Repository for customer orders.
Orders are created by the storefront checkout; the admin side only reads,
changes status / payment status and deletes them.
"""

from typing import List, Optional
import logging
import re

from bson import ObjectId
from pydantic import ValidationError
from pymongo import DESCENDING

from rajaoil_admin.config import ORDERS_COLLECTION, DEFAULT_ORDER_LIMIT
from rajaoil_admin.errors import InvalidValueError
from rajaoil_admin.models.order import (
    Order,
    OrderStatistics,
    OrderStatus,
    PaymentStatus,
    ORDER_STATUSES,
    PAYMENT_STATUSES,
)
from rajaoil_admin.utils.string_utils import contains_ignore_case
from rajaoil_admin.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def to_document_id(value: str):
    """
    Store ids are opaque strings. Ids that look like a MongoDB ObjectId
    (24 hex characters) are looked up as ObjectId.
    """
    if isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def parse_filter(value: Optional[str]) -> Optional[str]:
    """
    Returns the lowercased filter value, or None for "no filter" (empty or "all").
    Values outside the enums are passed through: they only match legacy documents.
    """
    if value is None:
        return None
    value = value.strip().lower()
    if not value or value == "all":
        return None
    return value


def equals_ignore_case(value: str) -> dict:
    return {"$regex": f"^{re.escape(value)}$", "$options": "i"}


def matches_search(order: Order, term: str) -> bool:
    return (
        contains_ignore_case(order.customerName, term)
        or contains_ignore_case(order.customerPhone, term)
        or contains_ignore_case(order.orderId, term)
    )


class OrderRepository:
    """Order Store Accessor"""

    def __init__(self, database):
        self.collection = database[ORDERS_COLLECTION]

    def list_orders(
        self,
        status: Optional[str] = None,
        limit: int = DEFAULT_ORDER_LIMIT,
        search: Optional[str] = None,
        payment_status: Optional[str] = None,
    ) -> List[Order]:
        """
        Lists orders newest first.

        Args:
            status: one of the order statuses, or "all"/None. Matched in the store, case-insensitively.
            limit: maximum number of orders fetched from the store
            search: matched against customer name, phone and order id
            payment_status: one of the payment statuses, or "all"/None

        Returns:
            The orders. The search is applied to the `limit`-bounded page only,
            so matching orders outside that page are not returned.
        """
        query = {}
        status_filter = parse_filter(status)
        if status_filter:
            query["status"] = equals_ignore_case(status_filter)
        payment_filter = parse_filter(payment_status)
        if payment_filter:
            query["paymentStatus"] = equals_ignore_case(payment_filter)

        cursor = self.collection.find(query).sort("createdAt", DESCENDING).limit(limit)

        orders = []
        for raw in cursor:
            try:
                orders.append(Order.from_document(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed order {raw.get('_id')}: {e.error_count()} error(s)")

        term = (search or "").strip()
        if term:
            orders = [order for order in orders if matches_search(order, term)]
        return orders

    def get_order(self, order_id: str) -> Optional[Order]:
        raw = self.collection.find_one({"_id": to_document_id(order_id)})
        if raw is None:
            return None
        return Order.from_document(raw)

    def set_status(self, order_id: str, status) -> int:
        """
        Sets the fulfillment status. Any status may follow any other.

        Returns:
            The number of matched orders (0 when the order does not exist)

        Raises:
            InvalidValueError: if the status is not allowed; nothing is written
        """
        if not isinstance(status, str) or status not in ORDER_STATUSES:
            raise InvalidValueError("Invalid status value")
        return self._set_fields(order_id, {"status": OrderStatus(status).value})

    def set_payment_status(self, order_id: str, payment_status) -> int:
        """Same contract as set_status, for the payment axis."""
        if not isinstance(payment_status, str) or payment_status not in PAYMENT_STATUSES:
            raise InvalidValueError("Invalid payment status value")
        return self._set_fields(order_id, {"paymentStatus": PaymentStatus(payment_status).value})

    def _set_fields(self, order_id: str, fields: dict) -> int:
        update = dict(fields)
        update["updatedAt"] = utcnow()
        # no upsert: a missing order must surface as not found
        result = self.collection.update_one({"_id": to_document_id(order_id)}, {"$set": update})
        if result.matched_count:
            logger.info(f"✅ Order {order_id} updated: {fields}")
        return result.matched_count

    def delete_order(self, order_id: str) -> int:
        """
        Permanently deletes an order, whatever its status.

        Returns:
            The number of deleted orders (0 when the order does not exist)
        """
        doc_id = to_document_id(order_id)
        if self.collection.find_one({"_id": doc_id}, {"_id": 1}) is None:
            return 0
        result = self.collection.delete_one({"_id": doc_id})
        logger.info(f"🗑️ Order {order_id} deleted")
        return result.deleted_count

    def get_statistics(self) -> OrderStatistics:
        stats = OrderStatistics()
        projection = {"status": 1, "paymentStatus": 1, "total": 1}
        for raw in self.collection.find({}, projection):
            status = str(raw.get("status") or "").lower()
            payment = str(raw.get("paymentStatus") or "").lower()
            stats.totalOrders += 1
            if status != OrderStatus.CANCELLED.value:
                stats.totalRevenue += float(raw.get("total") or 0)
            if status == OrderStatus.PENDING.value:
                stats.pendingOrders += 1
            elif status == OrderStatus.PROCESSING.value:
                stats.processingOrders += 1
            elif status == OrderStatus.COMPLETED.value:
                stats.completedOrders += 1
            elif status == OrderStatus.CANCELLED.value:
                stats.cancelledOrders += 1
            if payment == PaymentStatus.PAID.value:
                stats.paidOrders += 1
        return stats
