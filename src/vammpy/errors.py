"""
Exception types raised by the vAMM math.

Both are precondition failures: the state or policy that triggered them is
corrupt, so callers should reject the action rather than retry it.
"""

__all__ = [
    "VammError",
    "InvalidSwapAmountError",
    "DeficitNotMadeUpError",
]


class VammError(Exception):
    pass


class InvalidSwapAmountError(VammError, ValueError):
    """Raised when a swap is simulated with a negative amount."""

    def __init__(self, swap_amount: int):
        super().__init__(f"swap_amount must be gte 0, got {swap_amount}")
        self.swap_amount = swap_amount


class DeficitNotMadeUpError(VammError, ArithmeticError):
    """Raised when shrinking the curve depth costs fees instead of freeing them.

    Attributes
    ----------
    cost : int
        The (positive) adjustment cost that was returned.
    numerator, denominator : int
        The depth ratio that was attempted.
    """

    def __init__(self, cost: int, numerator: int, denominator: int):
        super().__init__(
            f"deficit should be lte 0, k adjustment {numerator}/{denominator} costs {cost}"
        )
        self.cost = cost
        self.numerator = numerator
        self.denominator = denominator
