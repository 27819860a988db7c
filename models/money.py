"""
Fixed precision monetary value used for every seller revenue calculation.

Amounts are held as ``Decimal`` so summing many line items never accumulates
binary floating point drift. Near-equality checks go through ``is_close`` with
a one-cent tolerance because upstream storage may hand back amounts as floats
or decimal strings.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

CENTS = Decimal("0.01")
EPSILON = CENTS  # Default comparison tolerance (one hundredth of the currency unit)


def _to_decimal(value) -> Decimal:
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, bool):
        raise TypeError("Money does not accept booleans")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # str() gives the shortest repr, so 0.1 becomes Decimal("0.1")
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid monetary amount: {value!r}") from e
    raise TypeError(f"Unsupported monetary amount type: {type(value).__name__}")


@total_ordering
@dataclass(frozen=True, init=False)
class Money:
    """An amount in the marketplace's single currency."""

    amount: Decimal

    def __init__(self, amount=0):
        decimal_amount = _to_decimal(amount)
        if not decimal_amount.is_finite():
            raise ValueError(f"Monetary amount must be finite, got {amount!r}")
        object.__setattr__(self, "amount", decimal_amount)

    @classmethod
    def zero(cls) -> "Money":
        return cls(0)

    def __add__(self, other) -> "Money":
        if isinstance(other, Money):
            return Money(self.amount + other.amount)
        if isinstance(other, int) and other == 0:
            return self
        return NotImplemented

    def __radd__(self, other) -> "Money":
        # Lets the builtin sum() start from 0
        return self.__add__(other)

    def __sub__(self, other) -> "Money":
        if isinstance(other, Money):
            return Money(self.amount - other.amount)
        return NotImplemented

    def __neg__(self) -> "Money":
        return Money(-self.amount)

    def __abs__(self) -> "Money":
        return Money(abs(self.amount))

    def __mul__(self, quantity) -> "Money":
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return NotImplemented
        return Money(self.amount * quantity)

    __rmul__ = __mul__

    def __truediv__(self, other):
        """Divide by a count (average) or by another amount (ratio)."""
        if isinstance(other, Money):
            if other.amount == 0:
                raise ZeroDivisionError("Cannot take the ratio against a zero amount")
            return self.amount / other.amount
        if isinstance(other, int) and not isinstance(other, bool):
            if other == 0:
                raise ZeroDivisionError("Cannot divide money by zero")
            return Money(self.amount / other)
        return NotImplemented

    def __eq__(self, other) -> bool:
        if isinstance(other, Money):
            return self.amount == other.amount
        return NotImplemented

    def __lt__(self, other) -> bool:
        if isinstance(other, Money):
            return self.amount < other.amount
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.amount)

    def __bool__(self) -> bool:
        return self.amount != 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_close(self, other: "Money", epsilon: Decimal = EPSILON) -> bool:
        """True when the two amounts differ by strictly less than ``epsilon``."""
        return abs(self.amount - _to_decimal(other)) < epsilon

    def quantized(self) -> "Money":
        """Round half-up to whole cents."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP))

    def to_float(self) -> float:
        return float(self.quantized().amount)

    def __str__(self) -> str:
        return f"{self.quantized().amount:.2f}"

    def __repr__(self) -> str:
        return f"Money('{self.amount}')"
