from datetime import datetime, timezone

import pytest
from pymongo.errors import AutoReconnect, ServerSelectionTimeoutError

from rajaoil_admin.dependencies import get_order_repository
from rajaoil_admin.main import app
from rajaoil_admin.repositories.order_repo import OrderRepository


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value)


def test_list_orders_newest_first(client, insert_order):
    insert_order(orderId="ORD-1", createdAt=datetime(2024, 5, 1))
    insert_order(orderId="ORD-3", createdAt=datetime(2024, 5, 3))
    insert_order(orderId="ORD-2", createdAt=datetime(2024, 5, 2))

    response = client.get("/api/admin/orders")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 3
    assert [o["orderId"] for o in body["orders"]] == ["ORD-3", "ORD-2", "ORD-1"]


def test_list_orders_respects_limit(client, insert_order):
    for day in range(1, 6):
        insert_order(orderId=f"ORD-{day}", createdAt=datetime(2024, 5, day))

    body = client.get("/api/admin/orders", params={"limit": 2}).json()

    assert [o["orderId"] for o in body["orders"]] == ["ORD-5", "ORD-4"]


def test_status_filter_is_case_insensitive(client, insert_order):
    insert_order(orderId="ORD-1", status="Completed")
    insert_order(orderId="ORD-2", status="completed")
    insert_order(orderId="ORD-3", status="pending")

    body = client.get("/api/admin/orders", params={"status": "completed"}).json()

    assert sorted(o["orderId"] for o in body["orders"]) == ["ORD-1", "ORD-2"]
    assert all(o["status"] == "completed" for o in body["orders"])


def test_status_filter_all_returns_everything(client, insert_order):
    insert_order(orderId="ORD-1", status="cancelled")
    insert_order(orderId="ORD-2", status="pending")

    body = client.get("/api/admin/orders", params={"status": "all"}).json()

    assert body["count"] == 2


def test_payment_status_filter(client, insert_order):
    insert_order(orderId="ORD-1", paymentStatus="paid")
    insert_order(orderId="ORD-2", paymentStatus="pending")

    body = client.get("/api/admin/orders", params={"paymentStatus": "paid"}).json()

    assert [o["orderId"] for o in body["orders"]] == ["ORD-1"]


def test_unknown_filter_returns_only_matching_legacy_orders(client, insert_order):
    insert_order(orderId="ORD-1", status="pending")

    response = client.get("/api/admin/orders", params={"status": "shipped"})
    assert response.status_code == 200
    assert response.json()["orders"] == []

    insert_order(orderId="ORD-2", status="Shipped")
    body = client.get("/api/admin/orders", params={"status": "shipped"}).json()
    assert [o["orderId"] for o in body["orders"]] == ["ORD-2"]
    assert body["orders"][0]["status"] == "shipped"


def test_search_matches_name_phone_and_order_id(client, insert_order):
    insert_order(orderId="ORD-11111", customerName="Meena Sundaram", customerPhone="9000000001")
    insert_order(orderId="ORD-22222", customerName="Arun Kumar", customerPhone="9000000002")

    by_name = client.get("/api/admin/orders", params={"search": "meena"}).json()
    by_phone = client.get("/api/admin/orders", params={"search": "0002"}).json()
    by_id = client.get("/api/admin/orders", params={"search": "ord-111"}).json()

    assert [o["orderId"] for o in by_name["orders"]] == ["ORD-11111"]
    assert [o["orderId"] for o in by_phone["orders"]] == ["ORD-22222"]
    assert [o["orderId"] for o in by_id["orders"]] == ["ORD-11111"]


def test_search_only_covers_the_limited_page(client, insert_order):
    insert_order(orderId="ORD-OLD", customerName="Lakshmi", createdAt=datetime(2024, 1, 1))
    insert_order(orderId="ORD-NEW", customerName="Ravi", createdAt=datetime(2024, 6, 1))

    body = client.get("/api/admin/orders", params={"search": "lakshmi", "limit": 1}).json()

    assert body["orders"] == []
    assert body["count"] == 0


def test_limit_out_of_range_is_rejected(client):
    response = client.get("/api/admin/orders", params={"limit": 0})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_get_order_serializes_timestamps(client, insert_order):
    order_id = insert_order(createdAt=datetime(2024, 5, 1, 10, 0, 0))

    response = client.get(f"/api/admin/orders/{order_id}")

    assert response.status_code == 200
    order = response.json()["order"]
    assert order["id"] == order_id
    assert _parse(order["createdAt"]) == datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)
    assert order["deliveryAddress"]["district"] == "Madurai"


def test_get_order_with_opaque_string_id(client, insert_order):
    insert_order(_id="checkout-42")

    response = client.get("/api/admin/orders/checkout-42")

    assert response.status_code == 200
    assert response.json()["order"]["id"] == "checkout-42"


def test_get_missing_order(client):
    response = client.get("/api/admin/orders/64b7f0c2a1b2c3d4e5f60718")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Order not found"}


@pytest.mark.parametrize("value", ["shipped", "", "PENDING", None])
def test_invalid_status_is_rejected_without_write(client, db, insert_order, value):
    order_id = insert_order()
    before = db["orders"].find_one()

    response = client.patch(f"/api/admin/orders/{order_id}/status", json={"status": value})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid status value"}
    assert db["orders"].find_one() == before


@pytest.mark.parametrize("value", ["refunded", "", "Paid", None])
def test_invalid_payment_status_is_rejected_without_write(client, db, insert_order, value):
    order_id = insert_order()
    before = db["orders"].find_one()

    response = client.patch(f"/api/admin/orders/{order_id}/payment", json={"paymentStatus": value})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid payment status value"}
    assert db["orders"].find_one() == before


def test_status_update_leaves_payment_untouched(client, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="failed")

    response = client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "processing"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Order status updated successfully"}
    raw = db["orders"].find_one()
    assert raw["status"] == "processing"
    assert raw["paymentStatus"] == "failed"
    assert raw["total"] == 420
    assert raw["customerName"] == "Karthik Raman"


def test_payment_update_leaves_status_untouched(client, db, insert_order):
    order_id = insert_order(status="cancelled", paymentStatus="pending")

    response = client.patch(f"/api/admin/orders/{order_id}/payment", json={"paymentStatus": "paid"})

    assert response.status_code == 200
    raw = db["orders"].find_one()
    assert raw["paymentStatus"] == "paid"
    assert raw["status"] == "cancelled"


def test_any_status_may_follow_any_other(client, insert_order):
    order_id = insert_order(status="completed")

    response = client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "pending"})

    assert response.status_code == 200


def test_update_missing_order_is_not_created(client, db):
    missing = "64b7f0c2a1b2c3d4e5f60718"

    status = client.patch(f"/api/admin/orders/{missing}/status", json={"status": "completed"})
    payment = client.patch(f"/api/admin/orders/{missing}/payment", json={"paymentStatus": "paid"})

    assert status.status_code == 404
    assert payment.status_code == 404
    assert db["orders"].count_documents({}) == 0


def test_complete_and_pay_an_order(client, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")
    before = client.get(f"/api/admin/orders/{order_id}").json()["order"]

    client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "completed"})
    client.patch(f"/api/admin/orders/{order_id}/payment", json={"paymentStatus": "paid"})

    after = client.get(f"/api/admin/orders/{order_id}").json()["order"]
    assert after["status"] == "completed"
    assert after["paymentStatus"] == "paid"
    assert _parse(after["updatedAt"]) > _parse(before["updatedAt"])
    assert after["createdAt"] == before["createdAt"]


def test_delete_order(client, db, insert_order):
    order_id = insert_order(status="completed", paymentStatus="paid")
    insert_order(orderId="ORD-OTHER")

    response = client.delete(f"/api/admin/orders/{order_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Order deleted successfully"}
    assert db["orders"].count_documents({}) == 1
    assert client.get(f"/api/admin/orders/{order_id}").status_code == 404


def test_delete_missing_order(client):
    response = client.delete("/api/admin/orders/64b7f0c2a1b2c3d4e5f60718")

    assert response.status_code == 404
    assert response.json()["error"] == "Order not found"


def test_order_statistics(client, insert_order):
    insert_order(status="pending", paymentStatus="pending", total=100)
    insert_order(status="completed", paymentStatus="paid", total=250)
    insert_order(status="Processing", paymentStatus="paid", total=50)
    insert_order(status="cancelled", paymentStatus="failed", total=999)

    stats = client.get("/api/admin/orders/stats").json()["statistics"]

    assert stats == {
        "totalOrders": 4,
        "totalRevenue": 400,
        "pendingOrders": 1,
        "processingOrders": 1,
        "completedOrders": 1,
        "cancelledOrders": 1,
        "paidOrders": 2,
    }


def test_store_failure_is_reported_generically(client):
    class UnreachableRepository:
        def list_orders(self, **kwargs):
            raise ServerSelectionTimeoutError("cluster0.mongodb.net:27017 timed out")

    app.dependency_overrides[get_order_repository] = lambda: UnreachableRepository()

    response = client.get("/api/admin/orders")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch orders"}


def test_orders_require_authentication(anonymous_client, db, insert_order):
    order_id = insert_order()

    listing = anonymous_client.get("/api/admin/orders")
    update = anonymous_client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "completed"})

    assert listing.status_code == 401
    assert listing.json() == {"success": False, "error": "Authentication required"}
    assert update.status_code == 401
    assert db["orders"].find_one()["status"] == "pending"


def test_numeric_pincode_is_returned_as_text(client, insert_order):
    address = {"doorNo": 7, "address": "Anna Nagar", "district": "Chennai", "state": "Tamil Nadu", "pincode": 600040}
    order_id = insert_order(deliveryAddress=address)

    listing = client.get("/api/admin/orders").json()
    order = client.get(f"/api/admin/orders/{order_id}").json()["order"]

    assert listing["count"] == 1
    assert order["deliveryAddress"]["pincode"] == "600040"
    assert order["deliveryAddress"]["doorNo"] == "7"


def test_incomplete_orders_are_still_listed(client, db, insert_order):
    empty_name = insert_order(orderId="ORD-1", customerName="")
    bare = insert_order(orderId="ORD-2", status="Shipped")
    db["orders"].update_one({"orderId": "ORD-2"}, {"$unset": {"total": "", "deliveryAddress": "", "paymentStatus": ""}})

    listing = client.get("/api/admin/orders").json()
    assert listing["count"] == 2

    first = client.get(f"/api/admin/orders/{empty_name}").json()["order"]
    assert first["customerName"] == ""

    second = client.get(f"/api/admin/orders/{bare}").json()["order"]
    assert second["total"] == 0
    assert second["deliveryAddress"]["pincode"] == ""
    assert second["status"] == "shipped"
    assert second["paymentStatus"] == "pending"


def test_save_order_details_without_changes(client, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")
    before = db["orders"].find_one()

    response = client.put(f"/api/admin/orders/{order_id}", json={"status": "pending", "paymentStatus": "pending"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "No changes to save"
    assert body["writes"] == 0
    assert db["orders"].find_one() == before


def test_save_order_details_writes_changed_fields(client, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")

    one = client.put(f"/api/admin/orders/{order_id}", json={"status": "processing", "paymentStatus": "pending"}).json()
    assert (one["writes"], one["statusUpdated"], one["paymentUpdated"]) == (1, True, False)

    two = client.put(f"/api/admin/orders/{order_id}", json={"status": "completed", "paymentStatus": "paid"}).json()
    assert two["writes"] == 2
    assert two["message"] == "Order updated successfully"
    assert two["order"]["status"] == "completed"
    raw = db["orders"].find_one()
    assert (raw["status"], raw["paymentStatus"]) == ("completed", "paid")


def test_save_order_details_keeps_status_when_payment_fails(client, db, insert_order):
    class FlakyPaymentRepository(OrderRepository):
        def set_payment_status(self, order_id, payment_status):
            raise AutoReconnect("connection reset")

    app.dependency_overrides[get_order_repository] = lambda: FlakyPaymentRepository(db)
    order_id = insert_order(status="pending", paymentStatus="pending")

    response = client.put(f"/api/admin/orders/{order_id}", json={"status": "completed", "paymentStatus": "paid"})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Failed to update payment status"
    assert (body["statusUpdated"], body["paymentUpdated"], body["writes"]) == (True, False, 1)
    raw = db["orders"].find_one()
    assert raw["status"] == "completed"
    assert raw["paymentStatus"] == "pending"


def test_save_order_details_rejects_invalid_values(client, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")
    before = db["orders"].find_one()

    response = client.put(f"/api/admin/orders/{order_id}", json={"status": "shipped", "paymentStatus": "paid"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid status value"
    assert db["orders"].find_one() == before


def test_save_details_of_missing_order(client):
    response = client.put("/api/admin/orders/64b7f0c2a1b2c3d4e5f60718", json={"status": "completed"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Order not found"}
