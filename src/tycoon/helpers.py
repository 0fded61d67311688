# src/tycoon/helpers.py
import numpy as np

from tycoon.typing import Float1D


def clamp(value: int, lo: int, hi: int) -> int:
    """Return *value* bounded to the closed range ``[lo, hi]``."""
    return max(lo, min(hi, value))


def floor_at_zero(values: Float1D, eps: float = 1e-9) -> Float1D:
    """
    Clip a balance vector at zero in place.

    Entries within ``eps`` of zero are snapped to exactly 0.0 so rounding
    drift never shows up as a tiny residual balance.
    """
    np.maximum(values, 0.0, out=values)
    values[values < eps] = 0.0
    return values
