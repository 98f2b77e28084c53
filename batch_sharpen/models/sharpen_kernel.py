from __future__ import annotations
from dataclasses import dataclass
import math
import numpy as np


@dataclass(frozen=True)
class SharpenKernel:
    """
    Value-object for the 3x3 high-pass kernel driven by one amount `a`.

        0   -a    0
       -a  1+4a  -a
        0   -a    0

    Weights sum to 1, so a flat field passes through untouched.
    """
    amount: float = 0.45

    def __post_init__(self):
        if not math.isfinite(self.amount):
            raise ValueError(f"Sharpen amount must be finite, got {self.amount!r}")

    @property
    def center(self) -> float:
        return 1.0 + 4.0 * self.amount

    @property
    def side(self) -> float:
        return -self.amount

    def as_matrix(self) -> np.ndarray:
        s, c = self.side, self.center
        return np.array([[0.0, s, 0.0],
                         [s,   c, s],
                         [0.0, s, 0.0]], dtype=np.float64)
