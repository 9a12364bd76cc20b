"""Numeric codec for Starknet calldata.

Amounts travel as ``uint256`` values split into two 128-bit limbs
(``low``, ``high``); single-word arguments travel as field elements.
All encoding is exact integer arithmetic. Only :func:`format_units`,
which produces display strings, rounds.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import NamedTuple, Union

from eth_utils import to_hex

from .constants import FELT_PRIME, UINT128_BOUND, UINT256_BOUND
from .errors import EncodingError

Numeric = Union[int, str, Decimal]

# 2**256 has 78 decimal digits
MAX_INTEGER_DIGITS = 78


class Uint256(NamedTuple):
    """A 256-bit unsigned integer as two 128-bit limbs."""

    low: int
    high: int

    @property
    def value(self) -> int:
        return self.high * UINT128_BOUND + self.low

    def to_calldata(self) -> list[str]:
        return [to_hex(self.low), to_hex(self.high)]


def parse_integer(amount: Numeric) -> int:
    """Parse an exact integer from an int, an integral Decimal or a string.

    Strings may be decimal (``"1000"``, ``"1e18"``) or ``0x`` hexadecimal.

    Raises:
        EncodingError: If the value is not an exact integer
    """
    # bool is an int subclass; reject it explicitly
    if isinstance(amount, bool):
        raise EncodingError(f"Expected an integer amount, got bool {amount!r}")
    if isinstance(amount, int):
        return amount
    if isinstance(amount, Decimal):
        return _decimal_to_int(amount, amount)
    if isinstance(amount, str):
        text = amount.strip()
        if not text:
            raise EncodingError("Expected an integer amount, got an empty string")
        if text.lower().startswith(("0x", "-0x")):
            try:
                return int(text, 16)
            except ValueError as e:
                raise EncodingError(f"Invalid hex amount: {amount!r}") from e
        try:
            return _decimal_to_int(Decimal(text), amount)
        except InvalidOperation as e:
            raise EncodingError(f"Invalid decimal amount: {amount!r}") from e
    raise EncodingError(
        f"Unsupported amount type {type(amount).__name__}; "
        "use int, Decimal or str to avoid float rounding"
    )


def _decimal_to_int(value: Decimal, original: Numeric) -> int:
    if not value.is_finite():
        raise EncodingError(f"Amount must be finite, got {original!r}")
    if value.is_zero():
        return 0
    # Checked on the exponent; huge values are never expanded
    if value.adjusted() < 0:
        raise EncodingError(f"Amount must be an integer, got {original!r}")
    if value.adjusted() >= MAX_INTEGER_DIGITS:
        raise EncodingError(
            f"Amount has {value.adjusted() + 1} digits; "
            f"at most {MAX_INTEGER_DIGITS} are supported"
        )
    numerator, denominator = value.as_integer_ratio()
    if denominator != 1:
        raise EncodingError(f"Amount must be an integer, got {original!r}")
    return numerator


def to_uint256(amount: Numeric) -> Uint256:
    """Split ``amount`` into ``(low, high)`` limbs.

    low = value mod 2**128, high = value div 2**128.

    Raises:
        EncodingError: If the amount is negative, at least 2**256, or not
            an exact integer
    """
    value = parse_integer(amount)
    if value < 0:
        raise EncodingError("uint256 amount must be non-negative")
    if value >= UINT256_BOUND:
        raise EncodingError(
            f"uint256 amount exceeds 2**256 - 1 ({value.bit_length()} bits)"
        )
    high, low = divmod(value, UINT128_BOUND)
    return Uint256(low=low, high=high)


def from_uint256(low: int, high: int) -> int:
    """Recompose a uint256 from its limbs."""
    for name, limb in (("low", low), ("high", high)):
        if not 0 <= limb < UINT128_BOUND:
            raise EncodingError(
                f"uint256 {name} limb out of range ({limb.bit_length()} bits)"
            )
    return high * UINT128_BOUND + low


def to_felt(value: Numeric) -> int:
    """Encode a single field element.

    Raises:
        EncodingError: If the value is outside [0, FELT_PRIME)
    """
    parsed = parse_integer(value)
    if not 0 <= parsed < FELT_PRIME:
        raise EncodingError(
            f"Value does not fit in a field element ({parsed.bit_length()} bits)"
        )
    return parsed


def format_units(raw: int, decimals: int = 18, places: int = 4) -> str:
    """Format a raw token amount for display, rounded half up to ``places``."""
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = Decimal(raw).scaleb(-decimals)
        quantum = Decimal(1).scaleb(-places)
        return str(scaled.quantize(quantum, rounding=ROUND_HALF_UP))
