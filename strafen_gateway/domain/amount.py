"""Fixed-point money value with a major unit and a minor unit (euro and cent)"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from strafen_gateway.domain.exceptions import InvalidAmount

SUB_UNITS_PER_UNIT = 100

Factor = Union[int, float, Decimal]


@dataclass(frozen=True, order=True)
class Amount:
    """
    Non-negative monetary value.

    Invariants:
    - value (major unit) >= 0
    - sub_unit_value (minor unit) in [0, 99]
    - normalized on construction: minor unit overflow carries into the major
      unit, negative minor units borrow from it

    Field order matters: ordering compares the major unit first and the minor
    unit as tie-break.

    Example:
        Amount(19, 99) + Amount(0, 1) == Amount(20, 0)
        Amount(1, 250) == Amount(3, 50)
    """

    value: int
    sub_unit_value: int = 0

    def __post_init__(self) -> None:
        for field_value in (self.value, self.sub_unit_value):
            if not isinstance(field_value, int):
                raise TypeError(f"Amount components must be integers, got {field_value!r}")

        if self.value < 0:
            raise InvalidAmount(f"Amount is negative: {self.value}", raw_value=self.value)

        carry, sub_unit_value = divmod(self.sub_unit_value, SUB_UNITS_PER_UNIT)
        value = self.value + carry
        if value < 0:
            raise InvalidAmount(
                f"Amount is negative: {self.value},{self.sub_unit_value}",
                raw_value=(self.value, self.sub_unit_value),
            )

        object.__setattr__(self, "value", value)
        object.__setattr__(self, "sub_unit_value", sub_unit_value)

    # Constructors

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0, 0)

    @classmethod
    def from_cents(cls, cents: int) -> "Amount":
        """Amount from a total number of minor units, negative totals clamp to zero"""
        if cents <= 0:
            return cls.zero()
        return cls(*divmod(cents, SUB_UNITS_PER_UNIT))

    @classmethod
    def from_float(cls, raw: float) -> "Amount":
        """
        Amount from a real number.

        The sign is discarded: callers track whether an amount is a charge or a
        credit. The major unit is truncated, the minor unit is rounded to the
        nearest cent and clamped to [0, 99] so 5.999 becomes 5.99, not 6.00.

        Raises:
            InvalidAmount: raw value is NaN or infinite
        """
        if not math.isfinite(raw):
            raise InvalidAmount(f"Amount is not finite: {raw!r}", raw_value=raw)
        absolute = abs(raw)
        value = int(absolute)
        sub_unit_value = round(absolute * SUB_UNITS_PER_UNIT) - value * SUB_UNITS_PER_UNIT
        sub_unit_value = min(max(sub_unit_value, 0), SUB_UNITS_PER_UNIT - 1)
        return cls(value, sub_unit_value)

    @classmethod
    def decode(cls, raw: Any) -> "Amount":
        """
        Decode an amount serialized as a single real number.

        Raises:
            InvalidAmount: raw value is not a finite number or is negative
        """
        if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
            raise InvalidAmount(f"Amount is not a number: {raw!r}", raw_value=raw)
        if not isinstance(raw, int) and not math.isfinite(raw):
            raise InvalidAmount(f"Amount is not finite: {raw!r}", raw_value=raw)
        if raw < 0:
            raise InvalidAmount(f"Amount is negative: {raw!r}", raw_value=raw)
        if isinstance(raw, int):
            return cls(raw)
        return cls.from_float(float(raw))

    # Representations

    @property
    def cents(self) -> int:
        return self.value * SUB_UNITS_PER_UNIT + self.sub_unit_value

    @property
    def float_value(self) -> float:
        """
        Raises:
            InvalidAmount: amount exceeds the range of a float
        """
        try:
            return self.value + self.sub_unit_value / SUB_UNITS_PER_UNIT
        except OverflowError as e:
            raise InvalidAmount(
                f"Amount of {self.value.bit_length()} bits can't be represented as a real number",
                raw_value=(self.value, self.sub_unit_value),
            ) from e

    @property
    def string_value(self) -> str:
        """Display form used by the app: 19, 19,05 or 19,50"""
        if self.sub_unit_value == 0:
            return str(self.value)
        return f"{self.value},{self.sub_unit_value:02d}"

    def encode(self) -> float:
        return self.float_value

    def __str__(self) -> str:
        return self.string_value

    def __bool__(self) -> bool:
        return self.cents != 0

    # Arithmetic

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        sub_unit_value = self.sub_unit_value + other.sub_unit_value
        value = self.value + other.value + sub_unit_value // SUB_UNITS_PER_UNIT
        return Amount(value, sub_unit_value % SUB_UNITS_PER_UNIT)

    def __sub__(self, other: "Amount") -> "Amount":
        """Difference of two amounts, clamped to zero when other is larger"""
        if not isinstance(other, Amount):
            return NotImplemented
        sub_unit_value = self.sub_unit_value - other.sub_unit_value
        value = self.value - other.value - (0 if sub_unit_value >= 0 else 1)
        if value < 0:
            return Amount.zero()
        return Amount(value, sub_unit_value % SUB_UNITS_PER_UNIT)

    def __mul__(self, factor: Factor) -> "Amount":
        """
        Multiply by the absolute value of an integer or real factor.

        The product is computed exactly in integer cents and truncated toward
        zero to whole cents. Floats enter through their shortest decimal
        representation, so 0.01 is one hundredth and not its binary approximation.
        """
        if isinstance(factor, int):
            return Amount.from_cents(self.cents * abs(factor))
        if isinstance(factor, float):
            if not math.isfinite(factor):
                raise InvalidAmount(f"Factor is not finite: {factor!r}", raw_value=factor)
            return self._multiply_cents(Decimal(repr(abs(factor))))
        if isinstance(factor, Decimal):
            if not factor.is_finite():
                raise InvalidAmount(f"Factor is not finite: {factor!r}", raw_value=factor)
            return self._multiply_cents(abs(factor))
        return NotImplemented

    __rmul__ = __mul__

    def _multiply_cents(self, factor: Decimal) -> "Amount":
        # Exact rational product, floor division truncates the non-negative result
        numerator, denominator = factor.as_integer_ratio()
        return Amount.from_cents(self.cents * numerator // denominator)
