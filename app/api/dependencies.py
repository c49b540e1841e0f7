# app/api/dependencies.py
from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from app.data.database import get_session_factory
from app.services.cart_service import CartService, CartRegistry, cart_registry
from app.services.order_service import OrderService


def get_cart_registry() -> CartRegistry:
    return cart_registry


def get_order_service(session_factory: sessionmaker = Depends(get_session_factory)) -> OrderService:
    return OrderService(session_factory)


def get_cart_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    registry: CartRegistry = Depends(get_cart_registry),
    order_service: OrderService = Depends(get_order_service),
) -> CartService:
    return CartService(
        session_factory=session_factory,
        registry=registry,
        order_service=order_service,
    )
