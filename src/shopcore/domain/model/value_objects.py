"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from shopcore.domain.exceptions import ValidationError

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def scaled(self, rate: Decimal) -> Money:
        """Multiply by a decimal rate (e.g. a tax rate), rounded to the cent."""
        return Money(self.amount * rate, self.currency).rounded()

    def rounded(self) -> Money:
        """Round half-up to cent precision."""
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    def __float__(self) -> float:
        return float(self.amount)

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not sneak in as a quantity of 1
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ShippingAddress:
    """Address snapshot copied onto an order at creation time.

    Never a reference to a mutable address record: later edits to the
    customer's address book cannot change where a placed order ships.
    """

    full_name: str
    address: str
    city: str
    state: str
    zip_code: str
    country: str = "US"

    def __post_init__(self) -> None:
        missing = [
            label
            for label, value in (
                ("fullName", self.full_name),
                ("address", self.address),
                ("city", self.city),
                ("state", self.state),
                ("zipCode", self.zip_code),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise ValidationError(
                f"Shipping address is missing: {', '.join(missing)}"
            )

    @staticmethod
    def from_dict(raw: dict | None) -> ShippingAddress:
        """Build from the camelCase payload clients submit."""
        if not raw:
            raise ValidationError("Shipping address is required")
        return ShippingAddress(
            full_name=str(raw.get("fullName") or "").strip(),
            address=str(raw.get("address") or "").strip(),
            city=str(raw.get("city") or "").strip(),
            state=str(raw.get("state") or "").strip(),
            zip_code=str(raw.get("zipCode") or "").strip(),
            country=str(raw.get("country") or "US").strip(),
        )

    def to_dict(self) -> dict:
        return {
            "fullName": self.full_name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
        }


_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


@dataclass(frozen=True)
class OrderId:
    """Externally visible order identifier, e.g. ``ORD-LZ3K9Q1A-7F2KQX``.

    A millisecond timestamp token followed by six random base-36
    characters (about 2.2 billion combinations per millisecond).
    """

    value: str

    PREFIX = "ORD"

    def __post_init__(self) -> None:
        parts = self.value.split("-")
        if len(parts) != 3 or parts[0] != self.PREFIX or not all(parts[1:]):
            raise ValidationError(f"Malformed order id: {self.value!r}")

    @classmethod
    def generate(cls) -> OrderId:
        timestamp = _to_base36(time.time_ns() // 1_000_000)
        random_part = "".join(secrets.choice(_BASE36) for _ in range(6))
        return cls(f"{cls.PREFIX}-{timestamp}-{random_part}")

    def __str__(self) -> str:
        return self.value
