#app/api/routers/carts.py
from fastapi import APIRouter, Depends

from app.api.dependencies import get_cart_service
from app.api.errors import to_http_exception
from app.domain.errors import OrderError
from app.domain.schemas import (
    CartItemIn,
    CartQuantityIn,
    CartOut,
    CheckoutIn,
    OrderRead,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


@router.get("/{customer_id}", response_model=CartOut)
def get_cart(customer_id: int, svc: CartService = Depends(get_cart_service)):
    return svc.get_cart(customer_id)


@router.post("/{customer_id}/items", response_model=CartOut)
def add_item(
    customer_id: int,
    payload: CartItemIn,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_product(customer_id, payload.product_id, payload.quantity)
    except OrderError as e:
        raise to_http_exception(e)


@router.put("/{customer_id}/items/{product_id}", response_model=CartOut)
def set_item_quantity(
    customer_id: int,
    product_id: int,
    payload: CartQuantityIn,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.set_quantity(customer_id, product_id, payload.quantity)
    except OrderError as e:
        raise to_http_exception(e)


@router.delete("/{customer_id}/items/{product_id}", response_model=CartOut)
def remove_item(
    customer_id: int,
    product_id: int,
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_product(customer_id, product_id)


@router.delete("/{customer_id}", status_code=204)
def clear_cart(customer_id: int, svc: CartService = Depends(get_cart_service)):
    svc.clear_cart(customer_id)


@router.post("/{customer_id}/checkout", response_model=OrderRead, status_code=201)
def checkout(
    customer_id: int,
    payload: CheckoutIn,
    svc: CartService = Depends(get_cart_service),
):
    """
    Sklada zamowienie z koszyka sesji.
    409 = brak towaru / konflikt - koszyk zostaje, mozna ponowic.
    """
    try:
        return svc.checkout(customer_id, payload.payment_method)
    except OrderError as e:
        raise to_http_exception(e)
