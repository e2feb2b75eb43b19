from unittest import mock

import pytest
from pymongo.errors import AutoReconnect

from rajaoil_admin.errors import OrderNotFoundError
from rajaoil_admin.repositories.order_repo import OrderRepository
from rajaoil_admin.services.order_detail import OrderDetailSession


@pytest.fixture
def repo(db):
    return OrderRepository(db)


def test_load_missing_order(repo):
    session = OrderDetailSession(repo, "64b7f0c2a1b2c3d4e5f60718")

    with pytest.raises(OrderNotFoundError):
        session.load()


def test_save_without_changes_writes_nothing(repo, insert_order):
    order_id = insert_order(status="processing", paymentStatus="paid")
    session = OrderDetailSession(repo, order_id)
    session.load()

    with mock.patch.object(repo, "set_status") as set_status, \
            mock.patch.object(repo, "set_payment_status") as set_payment_status:
        result = session.save("processing", "paid")

    assert result.ok
    assert result.writes == 0
    set_status.assert_not_called()
    set_payment_status.assert_not_called()


def test_save_writes_only_the_changed_field(repo, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")
    session = OrderDetailSession(repo, order_id)
    session.load()

    with mock.patch.object(repo, "set_payment_status") as set_payment_status:
        result = session.save("completed", "pending")

    assert result.ok
    assert result.writes == 1
    assert result.status_updated and not result.payment_updated
    set_payment_status.assert_not_called()
    assert db["orders"].find_one()["status"] == "completed"


def test_save_writes_both_fields(repo, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")
    session = OrderDetailSession(repo, order_id)
    session.load()

    result = session.save("completed", "paid")

    assert result.ok
    assert result.writes == 2
    raw = db["orders"].find_one()
    assert (raw["status"], raw["paymentStatus"]) == ("completed", "paid")


def test_failed_payment_write_keeps_the_status_write(repo, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")
    session = OrderDetailSession(repo, order_id)
    session.load()

    with mock.patch.object(repo, "set_payment_status", side_effect=AutoReconnect("connection reset")):
        result = session.save("completed", "paid")

    assert not result.ok
    assert result.error == "Failed to update payment status"
    assert result.status_updated and not result.payment_updated
    raw = db["orders"].find_one()
    assert raw["status"] == "completed"
    assert raw["paymentStatus"] == "pending"

    # a second save only retries the payment
    with mock.patch.object(repo, "set_status") as set_status:
        retry = session.save("completed", "paid")

    set_status.assert_not_called()
    assert retry.ok
    assert retry.writes == 1
    assert db["orders"].find_one()["paymentStatus"] == "paid"


def test_failed_status_write_skips_the_payment(repo, db, insert_order):
    order_id = insert_order(status="pending", paymentStatus="pending")
    session = OrderDetailSession(repo, order_id)
    session.load()

    with mock.patch.object(repo, "set_payment_status") as set_payment_status:
        result = session.save("shipped", "paid")

    assert result.error == "Invalid status value"
    assert result.writes == 0
    set_payment_status.assert_not_called()
    assert db["orders"].find_one()["status"] == "pending"


def test_order_deleted_while_open(repo, db, insert_order):
    order_id = insert_order()
    session = OrderDetailSession(repo, order_id)
    session.load()
    db["orders"].delete_many({})

    result = session.save("completed", "pending")

    assert result.error == "Order not found"
    assert db["orders"].count_documents({}) == 0
