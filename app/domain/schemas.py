# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import List, Literal
from decimal import Decimal
from datetime import datetime

from app.domain.money import line_total
from app.utils.settings import DEFAULT_PAYMENT_METHOD


class ProductRead(BaseModel):
    """Snapshot produktu (koszyk trzyma go do wyswietlania ceny)."""

    id: int
    name: str
    price: Decimal
    stock_quantity: int

    model_config = ConfigDict(from_attributes=True, frozen=True)


class CustomerRead(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(..., gt=0, description="Ilosc produktu (musi byc > 0)")


class CartQuantityIn(BaseModel):
    """Nowa ilosc; 0 lub mniej usuwa pozycje."""

    quantity: int


class CartLineOut(BaseModel):
    product_id: int
    name: str
    quantity: int
    price: Decimal
    subtotal: Decimal


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    customer_id: int
    items: List[CartLineOut]
    total: Decimal


class CheckoutIn(BaseModel):
    payment_method: str = Field(DEFAULT_PAYMENT_METHOD, min_length=1, max_length=50)


class OrderLineIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class OrderCreate(BaseModel):
    """Schema dla bezposredniego zlozenia zamowienia (bez koszyka w sesji)."""

    customer_id: int = Field(..., gt=0, description="ID klienta (musi byc > 0)")
    items: List[OrderLineIn] = Field(..., min_length=1)
    payment_method: str = Field(DEFAULT_PAYMENT_METHOD, min_length=1, max_length=50)


class OrderStatusUpdate(BaseModel):
    status: Literal["Pending", "Completed", "Cancelled"]


class OrderItemRead(BaseModel):
    """Pozycja zamowienia - cena i ilosc z chwili zakupu, niezmienne."""

    id: int
    order_id: int
    product_id: int
    product_name: str
    quantity: int
    price_at_purchase: Decimal

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return line_total(self.price_at_purchase, self.quantity)


class OrderRead(BaseModel):
    """Schema dla zamowienia (response i przekazanie do paragonu)."""

    id: int
    customer_id: int
    status: str
    total_amount: Decimal
    payment_method: str
    created_at: datetime
    items: List[OrderItemRead]

    model_config = ConfigDict(from_attributes=True, frozen=True)
