"""
Order detail workflow: one "save" action over two independent fields.

The admin screen shows an order with a status and a payment status selector.
Saving only writes the fields that differ from what was last fetched, one write
per field. The writes are not atomic together: if the status write goes
through and the payment write fails, the status stays updated.
"""

from typing import Optional
import logging

from pydantic import BaseModel

from rajaoil_admin.errors import InvalidValueError, OrderNotFoundError
from rajaoil_admin.models.order import Order
from rajaoil_admin.repositories.order_repo import OrderRepository

logger = logging.getLogger(__name__)

INVALID = "invalid"
NOT_FOUND = "not_found"
FAULT = "fault"


class SaveResult(BaseModel):
    status_updated: bool = False
    payment_updated: bool = False
    writes: int = 0
    error: Optional[str] = None
    # INVALID, NOT_FOUND or FAULT when `error` is set
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class OrderDetailSession:
    def __init__(self, repository: OrderRepository, order_id: str):
        self.repository = repository
        self.order_id = order_id
        self.order: Optional[Order] = None

    def load(self) -> Order:
        order = self.repository.get_order(self.order_id)
        if order is None:
            raise OrderNotFoundError(self.order_id)
        self.order = order
        return order

    def save(self, status: Optional[str] = None, payment_status: Optional[str] = None) -> SaveResult:
        """
        Writes the changed fields, status first. None leaves a field as it is.
        Stops at the first failed write; writes already made are kept and the
        session remembers them, so saving again only retries what is left.
        """
        if self.order is None:
            self.load()

        result = SaveResult()

        if status is not None and status != self.order.status:
            if not self._write(result, self.repository.set_status, status, "order status"):
                return result
            self.order = self.order.model_copy(update={"status": status})
            result.status_updated = True
            result.writes += 1

        if payment_status is not None and payment_status != self.order.paymentStatus:
            if not self._write(result, self.repository.set_payment_status, payment_status, "payment status"):
                return result
            self.order = self.order.model_copy(update={"paymentStatus": payment_status})
            result.payment_updated = True
            result.writes += 1

        return result

    def _write(self, result: SaveResult, setter, value: str, label: str) -> bool:
        try:
            matched = setter(self.order_id, value)
        except InvalidValueError as e:
            result.error, result.failure = str(e), INVALID
            return False
        except Exception as e:
            logger.error(f"❌ Error updating {label} of order {self.order_id}: {e}")
            result.error, result.failure = f"Failed to update {label}", FAULT
            return False
        if matched == 0:
            result.error, result.failure = "Order not found", NOT_FOUND
            return False
        return True
