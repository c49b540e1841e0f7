# app/domain/money.py
"""
Kwoty pieniezne - zawsze Decimal, nigdy float.

Zasada zaokraglania (jedna w calym systemie): kazda linia price * quantity
jest zaokraglana half-up do 2 miejsc, potem linie sa sumowane. Tak samo
liczy koszyk, zamowienie i paragon, wiec nie ma rozjazdow o grosz.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    # str() zeby float 9.99 nie zamienil sie w 9.9900000000000002131...
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(price, quantity: int) -> Decimal:
    return to_money(Decimal(str(price)) * quantity)


def sum_lines(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    return sum((line_total(price, qty) for price, qty in lines), ZERO)
