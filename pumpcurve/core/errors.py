"""
Engine Errors

All failures raised by the pricing engine derive from CurveEngineError.
Nothing here is retried: errors propagate synchronously to the caller.
"""

from typing import Optional


class CurveEngineError(Exception):
    """Base class for pricing engine errors"""


class MalformedAccountData(CurveEngineError, ValueError):
    """Account buffer is shorter than its declared layout"""

    def __init__(self, message: str, expected: Optional[int] = None, actual: Optional[int] = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class UnknownDiscriminator(CurveEngineError, ValueError):
    """Leading 8-byte tag does not match any registered layout"""

    def __init__(self, discriminator: bytes):
        super().__init__(f"Unknown discriminator: {discriminator.hex()}")
        self.discriminator = discriminator


class CurveComplete(CurveEngineError):
    """Pricing requested against a graduated bonding curve"""

    def __init__(self, message: str = "Curve is complete"):
        super().__init__(message)


class ReservesExhausted(CurveEngineError, ArithmeticError):
    """A curve formula would divide by a zero reserve"""


class AccountNotFound(CurveEngineError):
    """Caller supplied no account snapshot to quote against"""


class SlippageExceeded(CurveEngineError):
    """Fill price moved past the authorized bound"""

    def __init__(self, message: str, bound: int, actual: int):
        super().__init__(message)
        self.bound = bound
        self.actual = actual


class InsufficientBalance(CurveEngineError):
    """Paper balance cannot cover a fill"""


class ConfigError(CurveEngineError, ValueError):
    """Invalid engine configuration"""
