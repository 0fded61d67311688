"""
Type aliases for Tycoon Engine.

Amortization schedules are computed as NumPy vectors before being split into
per-month rows.
"""

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

Float1D: TypeAlias = NDArray[np.float64]

__all__ = [
    "Float1D",
]
