from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from rajaoil_admin.config import DEFAULT_ORDER_LIMIT, MAX_ORDER_LIMIT
from rajaoil_admin.dependencies import get_order_repository
from rajaoil_admin.errors import InvalidValueError, OrderNotFoundError
from rajaoil_admin.models.order import OrderDetailUpdate, PaymentStatusUpdate, StatusUpdate
from rajaoil_admin.repositories.order_repo import OrderRepository
from rajaoil_admin.services.order_detail import FAULT, INVALID, NOT_FOUND, OrderDetailSession

logger = logging.getLogger(__name__)
router = APIRouter()

SAVE_FAILURE_CODES = {INVALID: 400, NOT_FOUND: 404, FAULT: 500}


@router.get("")
def list_orders(
    status: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_ORDER_LIMIT, ge=1, le=MAX_ORDER_LIMIT),
    search: Optional[str] = Query(None),
    payment_status: Optional[str] = Query(None, alias="paymentStatus"),
    repo: OrderRepository = Depends(get_order_repository),
):
    """
    Lists orders newest first, for the admin list screen.
    The search only looks at the `limit` most recent orders matching the filters.
    """
    try:
        orders = repo.list_orders(status=status, limit=limit, search=search, payment_status=payment_status)
    except Exception as e:
        logger.error(f"Error fetching orders: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")

    return {
        "success": True,
        "orders": [order.model_dump(mode="json") for order in orders],
        "count": len(orders),
    }


# Static routes are declared before '/{order_id}'

@router.get("/stats")
def get_order_statistics(repo: OrderRepository = Depends(get_order_repository)):
    try:
        stats = repo.get_statistics()
    except Exception as e:
        logger.error(f"Error computing order statistics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch order statistics")
    return {"success": True, "statistics": stats.model_dump(mode="json")}


@router.get("/{order_id}")
def get_order(order_id: str, repo: OrderRepository = Depends(get_order_repository)):
    try:
        order = repo.get_order(order_id)
    except Exception as e:
        logger.error(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch order")
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "order": order.model_dump(mode="json")}


@router.delete("/{order_id}")
def delete_order(order_id: str, repo: OrderRepository = Depends(get_order_repository)):
    """
    Permanently deletes an order. There is no check on its status.
    """
    try:
        deleted = repo.delete_order(order_id)
    except Exception as e:
        logger.error(f"Error deleting order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete order")
    if deleted == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "message": "Order deleted successfully"}


@router.patch("/{order_id}/status")
def update_order_status(
    order_id: str,
    payload: StatusUpdate,
    repo: OrderRepository = Depends(get_order_repository),
):
    try:
        matched = repo.set_status(order_id, payload.status)
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating order status {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update order status")
    if matched == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "message": "Order status updated successfully"}


@router.patch("/{order_id}/payment")
def update_payment_status(
    order_id: str,
    payload: PaymentStatusUpdate,
    repo: OrderRepository = Depends(get_order_repository),
):
    try:
        matched = repo.set_payment_status(order_id, payload.paymentStatus)
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating payment status {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update payment status")
    if matched == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "message": "Payment status updated successfully"}


@router.put("/{order_id}")
def save_order_details(
    order_id: str,
    payload: OrderDetailUpdate,
    repo: OrderRepository = Depends(get_order_repository),
):
    """
    Saves the order detail screen: writes status then payment status, only
    those that changed. A failed second write leaves the first one in place;
    the response says which fields were written.
    """
    session = OrderDetailSession(repo, order_id)
    try:
        session.load()
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except Exception as e:
        logger.error(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch order")

    result = session.save(status=payload.status, payment_status=payload.paymentStatus)
    body = {
        "statusUpdated": result.status_updated,
        "paymentUpdated": result.payment_updated,
        "writes": result.writes,
        "order": session.order.model_dump(mode="json"),
    }
    if not result.ok:
        return JSONResponse(
            status_code=SAVE_FAILURE_CODES[result.failure],
            content={"success": False, "error": result.error, **body},
        )
    message = "Order updated successfully" if result.writes else "No changes to save"
    return {"success": True, "message": message, **body}
