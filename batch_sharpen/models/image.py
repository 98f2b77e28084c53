from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


_DEPTH_SUFFIX = {
    np.dtype(np.uint8): ("gray8", "rgb24", "rgba32"),
    np.dtype(np.uint16): ("gray16", "rgb48", "rgba64"),
    np.dtype(np.float32): ("grayf", "rgbf", "rgbaf"),
}


@dataclass
class Image:
    """
    Decoded image exactly as the decoder produced it.
    Layout is whatever the file held: grey, RGB or RGBA, 8/16-bit or float.
    """
    pixels: np.ndarray # Shape (H, W) or (H, W, C), channels in RGB(A) order.
    path: Path | None = None # Source of the image.

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    @property
    def pixel_format(self) -> str:
        """Short label such as 'rgb24' or 'rgba64'; 'unknown' for unsupported layouts."""
        labels = _DEPTH_SUFFIX.get(self.pixels.dtype)
        index = {1: 0, 3: 1, 4: 2}.get(self.channels)
        if labels is None or index is None:
            return "unknown"
        return labels[index]
