# tests/test_cart_service.py
from decimal import Decimal

import pytest

from app.data.models import ProductModel
from app.domain.errors import (
    ValidationError,
    ProductNotFoundError,
    CustomerNotFoundError,
    InsufficientStockError,
)
from app.services.cart_service import CartService, CartRegistry


class RecordingNotifications:
    def __init__(self):
        self.sent = []

    def send_order_receipt(self, order):
        self.sent.append(order)


@pytest.fixture
def notifications():
    return RecordingNotifications()


@pytest.fixture
def cart_service(session_factory, order_service, notifications):
    return CartService(
        session_factory=session_factory,
        registry=CartRegistry(),
        order_service=order_service,
        notification_service=notifications,
    )


def test_add_and_view_cart(cart_service, customer, make_product):
    a = make_product("A", "9.99", 5)
    b = make_product("B", "5.00", 3)

    cart_service.add_product(customer, a, 2)
    view = cart_service.add_product(customer, b, 1)

    assert view["total"] == Decimal("24.98")
    assert [(i["product_id"], i["quantity"], i["subtotal"]) for i in view["items"]] == [
        (a, 2, Decimal("19.98")),
        (b, 1, Decimal("5.00")),
    ]


def test_add_unknown_product(cart_service, customer):
    with pytest.raises(ProductNotFoundError):
        cart_service.add_product(customer, 404, 1)
    assert cart_service.get_cart(customer)["items"] == []


def test_add_non_positive_quantity(cart_service, customer, make_product):
    a = make_product("A", "1.00", 5)
    with pytest.raises(ValidationError):
        cart_service.add_product(customer, a, 0)


def test_set_quantity_and_remove(cart_service, customer, make_product):
    a = make_product("A", "2.00", 5)
    cart_service.add_product(customer, a, 1)

    assert cart_service.set_quantity(customer, a, 3)["total"] == Decimal("6.00")
    assert cart_service.set_quantity(customer, a, 0)["items"] == []

    with pytest.raises(ValidationError):
        cart_service.set_quantity(customer, a, 2)

    cart_service.add_product(customer, a, 1)
    assert cart_service.remove_product(customer, a)["items"] == []


def test_checkout_success_clears_cart_and_sends_receipt(
    cart_service, customer, make_product, stock_of, notifications
):
    a = make_product("A", "9.99", 5)
    b = make_product("B", "5.00", 3)
    cart_service.add_product(customer, a, 2)
    cart_service.add_product(customer, b, 1)

    order = cart_service.checkout(customer, "Cash on Delivery")

    assert order.total_amount == Decimal("24.98")
    assert len(order.items) == 2
    assert stock_of(a) == 3 and stock_of(b) == 2
    assert cart_service.get_cart(customer)["items"] == []
    assert notifications.sent == [order]


def test_checkout_failure_keeps_cart(cart_service, customer, make_product, stock_of, counts, notifications):
    a = make_product("A", "9.99", 10)
    cart_service.add_product(customer, a, 10)
    with cart_service.session_factory() as s:
        s.get(ProductModel, a).stock_quantity = 2
        s.commit()

    with pytest.raises(InsufficientStockError):
        cart_service.checkout(customer, "Cash on Delivery")

    assert cart_service.get_cart(customer)["items"][0]["quantity"] == 10
    assert stock_of(a) == 2
    assert counts() == (0, 0)
    assert notifications.sent == []

    # klient zmniejsza ilosc i probuje jeszcze raz
    cart_service.set_quantity(customer, a, 2)
    order = cart_service.checkout(customer, "Cash on Delivery")
    assert order.items[0].quantity == 2
    assert counts() == (1, 1)


def test_checkout_empty_cart(cart_service, customer):
    with pytest.raises(ValidationError):
        cart_service.checkout(customer, "Cash on Delivery")


def test_checkout_unknown_customer(cart_service, make_product, counts):
    a = make_product("A", "1.00", 1)
    cart_service.add_product(999, a, 1)

    with pytest.raises(CustomerNotFoundError):
        cart_service.checkout(999, "Cash on Delivery")
    assert counts() == (0, 0)


def test_clear_cart(cart_service, customer, make_product):
    a = make_product("A", "1.00", 1)
    cart_service.add_product(customer, a, 1)

    cart_service.clear_cart(customer)

    assert cart_service.get_cart(customer)["items"] == []


def test_items_added_during_checkout_stay_in_cart(cart_service, customer, make_product, monkeypatch):
    a = make_product("A", "1.00", 5)
    b = make_product("B", "2.00", 5)
    cart_service.add_product(customer, a, 1)

    place_order = cart_service.order_service.place_order

    def place_and_keep_shopping(**kwargs):
        order = place_order(**kwargs)
        # drugi request tego samego klienta w trakcie checkoutu
        cart_service.add_product(customer, b, 2)
        cart_service.add_product(customer, a, 3)
        return order

    monkeypatch.setattr(cart_service.order_service, "place_order", place_and_keep_shopping)

    order = cart_service.checkout(customer, "Cash on Delivery")

    assert [(i.product_id, i.quantity) for i in order.items] == [(a, 1)]
    view = cart_service.get_cart(customer)
    assert [(i["product_id"], i["quantity"]) for i in view["items"]] == [(a, 3), (b, 2)]


def test_reads_do_not_create_carts(cart_service):
    for customer_id in range(1, 501):
        view = cart_service.get_cart(customer_id)
        assert view["items"] == [] and view["total"] == Decimal("0.00")
        cart_service.remove_product(customer_id, 1)

    assert len(cart_service.registry) == 0


def test_set_quantity_without_cart(cart_service, customer):
    with pytest.raises(ValidationError):
        cart_service.set_quantity(customer, 1, 3)
    assert len(cart_service.registry) == 0


def test_registry_drops_cart_after_checkout_and_when_emptied(cart_service, customer, make_product):
    a = make_product("A", "1.00", 5)

    cart_service.add_product(customer, a, 1)
    assert len(cart_service.registry) == 1
    cart_service.checkout(customer, "Cash on Delivery")
    assert len(cart_service.registry) == 0

    cart_service.add_product(customer, a, 1)
    cart_service.set_quantity(customer, a, 0)
    assert len(cart_service.registry) == 0
