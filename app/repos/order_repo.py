# app/repos/order_repo.py
from decimal import Decimal
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


class OrderRepo:
    """
    Zapis zamowien i pozycji. Repo tylko flushuje (zeby dostac id),
    commit/rollback robi UnitOfWork.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert_order(
        self,
        customer_id: int,
        total_amount: Decimal,
        status: str,
        payment_method: str,
    ) -> OrderModel:
        order = OrderModel(
            customer_id=customer_id,
            total_amount=total_amount,
            status=status,
            payment_method=payment_method,
        )
        self.db.add(order)
        self.db.flush()
        return order

    def insert_order_item(
        self,
        order_id: int,
        product_id: int,
        product_name: str,
        quantity: int,
        price_at_purchase: Decimal,
    ) -> OrderItemModel:
        item = OrderItemModel(
            order_id=order_id,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            price_at_purchase=price_at_purchase,
        )
        self.db.add(item)
        self.db.flush()
        return item

    def set_order_total(self, order: OrderModel, total_amount: Decimal) -> None:
        order.total_amount = total_amount
        self.db.flush()

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, customer_id: int | None = None) -> List[OrderModel]:
        stmt = select(OrderModel).options(selectinload(OrderModel.items))
        if customer_id is not None:
            stmt = stmt.where(OrderModel.customer_id == customer_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.flush()
        return order
