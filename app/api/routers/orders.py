# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_order_service
from app.api.errors import to_http_exception
from app.domain.errors import OrderError
from app.domain.schemas import OrderCreate, OrderRead, OrderStatusUpdate
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderRead, status_code=201)
def create_order(
    payload: OrderCreate,
    svc: OrderService = Depends(get_order_service),
):
    """
    Sklada zamowienie z jawnie podanych pozycji.
    Powtorzony product_id jest sumowany.
    """
    items = {}
    for line in payload.items:
        items[line.product_id] = items.get(line.product_id, 0) + line.quantity

    try:
        svc.ensure_customer(payload.customer_id)
        order = svc.place_order(payload.customer_id, items, payload.payment_method)
    except OrderError as e:
        raise to_http_exception(e)

    NotificationService.send_order_receipt(order)
    return order


@router.get("/", response_model=List[OrderRead])
def list_orders(
    customer_id: int | None = Query(None),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.list_orders(customer_id)
    except OrderError as e:
        raise to_http_exception(e)


@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: int,
    customer_id: int | None = Query(None),
    svc: OrderService = Depends(get_order_service),
):
    """
    Pobiera szczegoly zamowienia z pozycjami.
    """
    try:
        return svc.get_order(order_id, customer_id)
    except (OrderError, PermissionError) as e:
        raise to_http_exception(e)


@router.patch("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.update_order_status(order_id, payload.status)
    except OrderError as e:
        raise to_http_exception(e)
