# app/services/order_service.py
from decimal import Decimal
from enum import Enum
from typing import List, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.data.models.order import ORDER_PENDING, ORDER_COMPLETED, ORDER_CANCELLED, ORDER_STATUSES
from app.data.unit_of_work import UnitOfWork
from app.domain.errors import (
    ValidationError,
    ProductNotFoundError,
    CustomerNotFoundError,
    OrderNotFoundError,
    InsufficientStockError,
    ConcurrencyConflictError,
    InvalidStatusTransitionError,
    PersistenceError,
)
from app.domain.money import ZERO, to_money, sum_lines
from app.domain.schemas import OrderRead
from app.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PAYMENT_METHOD_LENGTH = 50

# Pending -> Completed/Cancelled, dalej bez zmian
_ALLOWED_TRANSITIONS = {
    ORDER_PENDING: {ORDER_COMPLETED, ORDER_CANCELLED},
}


class CheckoutState(str, Enum):
    VALIDATING = "VALIDATING"
    RESERVING = "RESERVING"
    COMMITTING = "COMMITTING"
    COMMITTED = "COMMITTED"
    ABORTED = "ABORTED"


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.

    place_order - jedna transakcja: zamowienie + pozycje + warunkowe
    zmniejszenie stanow. Albo wszystko, albo nic.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def place_order(
        self,
        customer_id: int,
        cart_items: Mapping[int, int],
        payment_method: str,
        cart_total: Decimal | None = None,
    ) -> OrderRead:
        """
        Use Case: Zlozenie zamowienia z pozycji koszyka.

        1. Walidacja (bez otwierania transakcji)
        2. Insert zamowienia (Pending), dostajemy id
        3. Dla kazdego produktu rosnaco po id: swiezy odczyt, sprawdzenie stanu,
           insert pozycji z aktualna cena, warunkowy UPDATE stanu
        4. Przeliczenie totala z pozycji i commit

        Kazdy blad = rollback calej transakcji, koszyk klienta zostaje bez zmian.
        """
        state = CheckoutState.VALIDATING
        self._validate(customer_id, cart_items, payment_method)

        try:
            with UnitOfWork(self.session_factory) as uow:
                state = self._transition(state, CheckoutState.RESERVING, customer_id)

                order = uow.orders.insert_order(
                    customer_id=customer_id,
                    total_amount=to_money(cart_total) if cart_total is not None else ZERO,
                    status=ORDER_PENDING,
                    payment_method=payment_method.strip(),
                )
                logger.info(f"Order {order.id} opened for customer {customer_id}")

                # rosnaco po id - ta sama kolejnosc blokad wierszy we wszystkich zamowieniach
                for product_id in sorted(cart_items):
                    quantity = cart_items[product_id]

                    product = uow.products.get_product(product_id)
                    if product is None:
                        raise ProductNotFoundError(product_id)

                    if product.stock_quantity < quantity:
                        raise InsufficientStockError(
                            product_id=product.id,
                            product_name=product.name,
                            requested=quantity,
                            available=product.stock_quantity,
                        )

                    uow.orders.insert_order_item(
                        order_id=order.id,
                        product_id=product.id,
                        product_name=product.name,
                        quantity=quantity,
                        price_at_purchase=to_money(product.price),
                    )

                    if not uow.products.decrement_stock_if_available(product.id, quantity):
                        raise ConcurrencyConflictError(product.id, product.name)

                    logger.info(
                        f"Order {order.id}: reserved {quantity} x product {product.id} "
                        f"@ {product.price}"
                    )

                state = self._transition(state, CheckoutState.COMMITTING, customer_id)

                uow.session.refresh(order, attribute_names=["items"])
                total = sum_lines((i.price_at_purchase, i.quantity) for i in order.items)
                if cart_total is not None and to_money(cart_total) != total:
                    logger.warning(
                        f"Order {order.id}: cart total {cart_total} differs from "
                        f"charged total {total} (prices changed since added to cart)"
                    )
                uow.orders.set_order_total(order, total)

                uow.commit()
                result = OrderRead.model_validate(order)

        except SQLAlchemyError as e:
            self._transition(state, CheckoutState.ABORTED, customer_id)
            logger.error(f"Checkout for customer {customer_id} failed in the store: {e}")
            raise PersistenceError(f"Blad zapisu zamowienia: {e}") from e
        except Exception as e:
            self._transition(state, CheckoutState.ABORTED, customer_id)
            logger.warning(f"Checkout for customer {customer_id} aborted: {e}")
            raise

        self._transition(state, CheckoutState.COMMITTED, customer_id)
        logger.info(
            f"Order {result.id} committed for customer {customer_id}: "
            f"{len(result.items)} items, total {result.total_amount}"
        )
        return result

    def ensure_customer(self, customer_id: int) -> None:
        """
        Sprawdzenie klienta - robi to wolajacy przed place_order, samo place_order ufa wolajacemu.
        """
        try:
            with UnitOfWork(self.session_factory) as uow:
                if uow.customers.get_customer(customer_id) is None:
                    raise CustomerNotFoundError(customer_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Blad odczytu klienta: {e}") from e

    def get_order(self, order_id: int, customer_id: int | None = None) -> OrderRead:
        """
        Use Case: Pobranie zamowienia z pozycjami (Query).
        """
        try:
            with UnitOfWork(self.session_factory) as uow:
                order = uow.orders.get_order(order_id)

                if not order:
                    raise OrderNotFoundError(order_id)

                if customer_id is not None and order.customer_id != customer_id:
                    raise PermissionError("Brak dostepu do zamowienia")

                return OrderRead.model_validate(order)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Blad odczytu zamowienia: {e}") from e

    def list_orders(self, customer_id: int | None = None) -> List[OrderRead]:
        try:
            with UnitOfWork(self.session_factory) as uow:
                return [OrderRead.model_validate(o) for o in uow.orders.list_orders(customer_id)]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Blad odczytu zamowien: {e}") from e

    def update_order_status(self, order_id: int, status: str) -> OrderRead:
        """
        Use Case: Zmiana statusu (Command). Pozycje i stany magazynowe bez zmian.
        """
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Nieznany status: {status}")

        try:
            with UnitOfWork(self.session_factory) as uow:
                order = uow.orders.get_order(order_id)

                if not order:
                    raise OrderNotFoundError(order_id)

                if status not in _ALLOWED_TRANSITIONS.get(order.status, set()):
                    raise InvalidStatusTransitionError(order_id, order.status, status)

                uow.orders.update_order_status(order, status)
                uow.commit()

                logger.info(f"Order {order_id} status changed to {status}")
                return OrderRead.model_validate(order)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Blad zmiany statusu zamowienia: {e}") from e

    @staticmethod
    def _validate(customer_id: int, cart_items: Mapping[int, int], payment_method: str) -> None:
        if not isinstance(customer_id, int) or isinstance(customer_id, bool) or customer_id <= 0:
            raise ValidationError("Niepoprawne ID klienta")

        if not cart_items:
            raise ValidationError("Nie mozna zlozyc zamowienia z pustego koszyka")

        for product_id, quantity in cart_items.items():
            if not isinstance(product_id, int) or isinstance(product_id, bool) or product_id <= 0:
                raise ValidationError(f"Niepoprawne ID produktu: {product_id!r}")
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
                raise ValidationError(
                    f"Ilosc produktu {product_id} musi byc dodatnia liczba calkowita"
                )

        if not payment_method or not payment_method.strip():
            raise ValidationError("Metoda platnosci jest wymagana")

        if len(payment_method.strip()) > MAX_PAYMENT_METHOD_LENGTH:
            raise ValidationError("Metoda platnosci jest za dluga")

    @staticmethod
    def _transition(current: CheckoutState, new: CheckoutState, customer_id: int) -> CheckoutState:
        logger.debug(f"Checkout for customer {customer_id}: {current.value} -> {new.value}")
        return new
