# backend/modules/orders/services/order_calculation_service.py

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from core.exceptions import ValidationError
from ..schemas.order_schemas import Order, OrderItem

# Flat sales tax on every order's subtotal; fixed, not configurable.
TAX_RATE = Decimal("0.10")

CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def round2(value: Number) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def calculate_subtotal(items: Iterable[OrderItem]) -> Decimal:
    return round2(sum((item.price * item.quantity for item in items),
                      Decimal("0")))


def calculate_totals(
    items: Iterable[OrderItem],
    discount: Number = Decimal("0"),
    tax_rate: Decimal = TAX_RATE,
) -> OrderTotals:
    """
    Calculate subtotal, tax and total for a set of order lines.

    Tax is charged on the full subtotal; the discount comes off the taxed
    amount: ``total = subtotal + tax - discount``.
    """
    discount = round2(discount)
    if discount < 0:
        raise ValidationError("Discount cannot be negative")

    subtotal = calculate_subtotal(items)
    tax = round2(subtotal * tax_rate)
    total = subtotal + tax - discount

    return OrderTotals(subtotal=subtotal, tax=tax, discount=discount,
                       total=total)


def apply_totals(order: Order) -> Order:
    """Recompute the order's derived financial fields in place"""
    totals = calculate_totals(order.items, order.discount)
    order.subtotal = totals.subtotal
    order.tax = totals.tax
    order.discount = totals.discount
    order.total = totals.total
    return order


def validate_discount(order: Order, amount: Number) -> Decimal:
    """Check a discount against the order's taxed amount"""
    amount = round2(amount)
    if amount < 0:
        raise ValidationError("Discount cannot be negative")

    totals = calculate_totals(order.items)
    if amount > totals.total:
        raise ValidationError(
            f"Discount {amount} exceeds order total {totals.total}"
        )
    return amount
