import numpy as np

from ..models.canonical_buffer import CanonicalBuffer
from ..models.sharpen_kernel import SharpenKernel


class SharpenFilter:
    """
    Applies the 3x3 SharpenKernel to a CanonicalBuffer.
    *   Returns a new buffer; the input is only ever read.
    *   The outer ring of pixels is copied as-is, never convolved.
    """

    def apply(self, buffer: CanonicalBuffer, amount: float) -> CanonicalBuffer:
        """
        Args:
            buffer (CanonicalBuffer): Canonical RGB buffer to sharpen.
            amount (float): Sharpen amount `a`; 0 is the identity.

        Returns:
            (CanonicalBuffer): New buffer with the same width, height and stride.
        """
        buffer.validate()
        kernel = SharpenKernel(amount)

        out = CanonicalBuffer.empty_like(buffer)
        src = buffer.pixels
        dst = out.pixels
        dst[...] = src  # border ring keeps these values

        if buffer.width < 3 or buffer.height < 3:
            return out

        p = src.astype(np.float64)
        neighbours = (p[1:-1, :-2] + p[1:-1, 2:] +  # left, right
                      p[:-2, 1:-1] + p[2:, 1:-1])   # up, down
        value = kernel.center * p[1:-1, 1:-1] + kernel.side * neighbours

        # add 0.5 and truncate toward zero, then clamp
        dst[1:-1, 1:-1] = np.clip(np.trunc(value + 0.5), 0, 255).astype(np.uint8)
        return out
