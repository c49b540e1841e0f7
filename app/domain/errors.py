# app/domain/errors.py
"""
Bledy skladania zamowienia.

ValidationError - zle dane wejsciowe, transakcja nie jest otwierana.
InsufficientStockError / ConcurrencyConflictError - transakcja wycofana,
klient moze sprobowac ponownie (retryable).
PersistenceError - baza niedostepna albo odrzucila zapis, bez ponawiania.
"""


class OrderError(Exception):
    retryable = False


class ValidationError(OrderError, ValueError):
    pass


class ProductNotFoundError(OrderError, LookupError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Produkt {product_id} nie istnieje")


class CustomerNotFoundError(OrderError, LookupError):
    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__(f"Klient {customer_id} nie istnieje")


class OrderNotFoundError(OrderError, LookupError):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Zamowienie {order_id} nie istnieje")


class InsufficientStockError(OrderError):
    retryable = True

    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Brak wystarczajacej ilosci produktu '{product_name}' "
            f"(zamowiono {requested}, dostepne {available})"
        )


class ConcurrencyConflictError(OrderError, RuntimeError):
    retryable = True

    def __init__(self, product_id: int, product_name: str | None = None):
        self.product_id = product_id
        self.product_name = product_name
        super().__init__(
            f"Konflikt wspolbieznosci - stan produktu {product_name or product_id} "
            f"zostal zmieniony przez inne zamowienie"
        )


class InvalidStatusTransitionError(OrderError):
    def __init__(self, order_id: int, current: str, requested: str):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Nie mozna zmienic statusu zamowienia {order_id} z {current} na {requested}"
        )


class PersistenceError(OrderError, RuntimeError):
    pass
