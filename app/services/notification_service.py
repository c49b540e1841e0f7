# app/services/notification_service.py
from kombu.exceptions import OperationalError as KombuOperationalError

from app.celery_worker import celery_app
from app.domain.schemas import OrderRead
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Przekazanie gotowego zamowienia do generatora paragonu.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_receipt(order: OrderRead):
        # zamowienie jest juz zacommitowane, blad brokera go nie cofa
        try:
            send_order_receipt_task.delay(order.model_dump(mode="json"))
        except KombuOperationalError as e:
            logger.warning(f"Failed to queue receipt for order {order.id}: {e}")


@celery_app.task(name="app.services.notification_service.send_order_receipt_task")
def send_order_receipt_task(order: dict):
    """
    Celery task - generator paragonu jest zewnetrzny i tylko czyta zamowienie.
    Tutaj logujemy pozycje tak, jak pojawia sie na paragonie.
    """
    for item in order["items"]:
        logger.info(
            f"[RECEIPT] Order {order['id']}: {item['product_name']} "
            f"{item['quantity']} x {item['price_at_purchase']} = {item['subtotal']}"
        )
    logger.info(
        f"[RECEIPT] Order {order['id']} for customer {order['customer_id']}: "
        f"total {order['total_amount']} ({order['payment_method']})"
    )

    return {"order_id": order["id"], "status": "sent"}
