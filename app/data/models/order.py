from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.data.database import Base

ORDER_PENDING = "Pending"
ORDER_COMPLETED = "Completed"
ORDER_CANCELLED = "Cancelled"

ORDER_STATUSES = (ORDER_PENDING, ORDER_COMPLETED, ORDER_CANCELLED)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=ORDER_PENDING)  # Pending, Completed, Cancelled
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
