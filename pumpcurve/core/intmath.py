"""
Exact Integer Helpers

The on-chain program does all bookkeeping in unsigned integers and truncates
every division toward zero. Python's ``//`` floors instead, which only agrees
for non-negative operands, so curve formulas divide through div_trunc.
"""

BPS_DENOMINATOR = 10_000
U64_MAX = 2**64 - 1


def div_trunc(numerator: int, denominator: int) -> int:
    """
    Integer division truncating toward zero

    Raises:
        ZeroDivisionError: if denominator is zero
    """
    if denominator == 0:
        raise ZeroDivisionError("integer division by zero")

    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def apply_bps(amount: int, basis_points: int) -> int:
    """Return amount * basis_points / 10000, truncated"""
    return div_trunc(amount * basis_points, BPS_DENOMINATOR)


def as_u64(value: int, field: str = "value") -> int:
    """Validate that value fits an unsigned 64-bit field"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field} must be an integer, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{field} out of u64 range: {value}")
    return value
