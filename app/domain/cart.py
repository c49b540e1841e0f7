# app/domain/cart.py
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple

from app.domain.money import line_total, sum_lines
from app.domain.schemas import ProductRead
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartLine(NamedTuple):
    product_id: int
    quantity: int
    product: ProductRead

    @property
    def subtotal(self) -> Decimal:
        return line_total(self.product.price, self.quantity)


class Cart:
    """
    Koszyk jednej sesji klienta, tylko w pamieci.

    - ilosci i snapshoty produktow zawsze zmieniane razem
    - pozycja z iloscia <= 0 nie istnieje (usuwamy, nie trzymamy zera)
    - snapshot sluzy tylko do wyswietlania ceny, przy zamowieniu cena
      i stan sa czytane na nowo z bazy
    - brak wspolbieznosci, jeden watek na sesje
    """

    def __init__(self):
        self._items: Dict[int, int] = {}
        self._products: Dict[int, ProductRead] = {}

    def add_item(self, product: ProductRead | None, quantity: int) -> bool:
        if product is None or quantity <= 0:
            logger.warning(
                f"Cart: pominieto dodanie produktu {getattr(product, 'id', None)} "
                f"z iloscia {quantity}"
            )
            return False

        self._items[product.id] = self._items.get(product.id, 0) + quantity
        # pierwszy snapshot wygrywa
        self._products.setdefault(product.id, product)
        return True

    def remove_item(self, product_id: int) -> None:
        self._items.pop(product_id, None)
        self._products.pop(product_id, None)

    def set_item_quantity(self, product_id: int, quantity: int) -> bool:
        if quantity <= 0:
            self.remove_item(product_id)
            return True

        if product_id not in self._items:
            logger.warning(f"Cart: produktu {product_id} nie ma w koszyku, nie mozna ustawic ilosci")
            return False

        self._items[product_id] = quantity
        return True

    def get_items(self) -> Mapping[int, int]:
        return MappingProxyType(dict(self._items))

    def get_product_details(self, product_id: int) -> ProductRead | None:
        return self._products.get(product_id)

    def lines(self) -> List[CartLine]:
        return [
            CartLine(pid, qty, self._products[pid])
            for pid, qty in sorted(self._items.items())
        ]

    def get_total(self) -> Decimal:
        return sum_lines((self._products[pid].price, qty) for pid, qty in self._items.items())

    def remove_ordered(self, ordered: Mapping[int, int]) -> None:
        # zdejmuje tylko to, co zostalo zamowione; pozycje dodane w trakcie zostaja
        for product_id, quantity in ordered.items():
            remaining = self._items.get(product_id, 0) - quantity
            if remaining > 0:
                self._items[product_id] = remaining
            else:
                self.remove_item(product_id)

    def clear(self) -> None:
        self._items.clear()
        self._products.clear()

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
