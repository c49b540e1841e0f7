# app/services/cart_service.py
import threading
from contextlib import contextmanager
from typing import Dict, Any, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.data.unit_of_work import UnitOfWork
from app.domain.cart import Cart
from app.domain.errors import (
    ValidationError,
    ProductNotFoundError,
    PersistenceError,
)
from app.domain.money import ZERO
from app.domain.schemas import OrderRead, ProductRead
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartRegistry:
    """
    Koszyki sesji w pamieci procesu: customer_id -> Cart.

    Kazda zmiana koszyka idzie przez open() pod lockiem rejestru, bo kilka
    requestow jednego klienta moze trafic do roznych watkow. Pusty koszyk
    jest usuwany z rejestru przy wyjsciu z open().
    """

    def __init__(self):
        self._carts: Dict[int, Cart] = {}
        self._lock = threading.Lock()

    @contextmanager
    def open(self, customer_id: int, create: bool = False) -> Iterator[Cart | None]:
        with self._lock:
            cart = self._carts.get(customer_id)
            if cart is None and create:
                cart = Cart()
                self._carts[customer_id] = cart
            try:
                yield cart
            finally:
                if cart is not None and cart.is_empty():
                    self._carts.pop(customer_id, None)

    def discard(self, customer_id: int) -> None:
        with self._lock:
            self._carts.pop(customer_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._carts)


cart_registry = CartRegistry()


class CartService:
    """
    Use case'y koszyka:
    commands (add, set, remove, clear, checkout) modyfikuja stan
    query (get) tylko odczyt
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        registry: CartRegistry,
        order_service: OrderService,
        notification_service: NotificationService | None = None,
    ):
        self.session_factory = session_factory
        self.registry = registry
        self.order_service = order_service
        self.notification_service = notification_service or NotificationService()

    #query - odczyt, nie tworzy koszyka
    def get_cart(self, customer_id: int) -> Dict[str, Any]:
        with self.registry.open(customer_id) as cart:
            return self._view(customer_id, cart)

    #commands
    def add_product(self, customer_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Ilosc musi byc wieksza niz 0")

        with self.registry.open(customer_id) as cart:
            # snapshot tylko gdy produktu jeszcze nie ma w koszyku
            snapshot = cart.get_product_details(product_id) if cart is not None else None

        if snapshot is None:
            logger.info(f"Pobieranie danych produktu {product_id}")
            snapshot = self._fetch_product(product_id)

        with self.registry.open(customer_id, create=True) as cart:
            cart.add_item(snapshot, quantity)
            logger.info(f"Produkt {product_id} x {quantity} dodany do koszyka klienta {customer_id}")
            return self._view(customer_id, cart)

    def set_quantity(self, customer_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        with self.registry.open(customer_id) as cart:
            if cart is None or not cart.set_item_quantity(product_id, quantity):
                raise ValidationError(f"Produktu {product_id} nie ma w koszyku")

            return self._view(customer_id, cart)

    def remove_product(self, customer_id: int, product_id: int) -> Dict[str, Any]:
        logger.info(f"Usuwanie produktu {product_id} z koszyka klienta {customer_id}")
        with self.registry.open(customer_id) as cart:
            if cart is not None:
                cart.remove_item(product_id)
            return self._view(customer_id, cart)

    def clear_cart(self, customer_id: int) -> None:
        # wylogowanie albo jawne czyszczenie
        self.registry.discard(customer_id)

    def checkout(self, customer_id: int, payment_method: str) -> OrderRead:
        """
        Use Case: Zamowienie z koszyka sesji.

        Klient musi istniec (sprawdzamy tutaj, OrderService juz nie).
        Sukces - z koszyka zdejmowane sa tylko zamowione ilosci, paragon w kolejce.
        Blad - koszyk bez zmian, klient moze poprawic ilosci i sprobowac jeszcze raz.
        """
        with self.registry.open(customer_id) as cart:
            if cart is None or cart.is_empty():
                raise ValidationError("Nie mozna zlozyc zamowienia z pustego koszyka")
            # kopia - transakcja nie trzyma locka rejestru
            items = dict(cart.get_items())
            cart_total = cart.get_total()

        self.order_service.ensure_customer(customer_id)

        order = self.order_service.place_order(
            customer_id=customer_id,
            cart_items=items,
            payment_method=payment_method,
            cart_total=cart_total,
        )

        with self.registry.open(customer_id) as cart:
            if cart is not None:
                cart.remove_ordered(items)

        self.notification_service.send_order_receipt(order)

        return order

    @staticmethod
    def _view(customer_id: int, cart: Cart | None) -> Dict[str, Any]:
        #dict przeksztalcany w jsona
        if cart is None:
            return {"customer_id": customer_id, "items": [], "total": ZERO}

        return {
            "customer_id": customer_id,
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.product.name,
                    "quantity": line.quantity,
                    "price": line.product.price,
                    "subtotal": line.subtotal,
                }
                for line in cart.lines()
            ],
            "total": cart.get_total(),
        }

    def _fetch_product(self, product_id: int) -> ProductRead:
        try:
            with UnitOfWork(self.session_factory) as uow:
                product = uow.products.get_product(product_id)
                if product is None:
                    raise ProductNotFoundError(product_id)
                return ProductRead.model_validate(product)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Blad odczytu produktu: {e}") from e

