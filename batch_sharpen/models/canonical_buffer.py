from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from ..errors import InvalidBuffer

CHANNELS = 3


@dataclass
class CanonicalBuffer:
    """
    Row-major RGB pixel buffer, 8 bits per channel, no alpha.

    Pixel (x, y) starts at byte ``y * stride + x * 3``. Rows may carry
    padding after ``width * 3`` bytes; padding is never read by the filter.
    """
    width: int
    height: int
    stride: int # Bytes between the starts of consecutive rows.
    data: np.ndarray # Flat uint8, exactly stride * height bytes.

    # ── Construction ────────────────────────────────────────────────
    @staticmethod
    def stride_for(width: int, alignment: int = 4) -> int:
        row = width * CHANNELS
        return -(-row // alignment) * alignment

    @classmethod
    def allocate(cls, width: int, height: int, stride: int | None = None) -> CanonicalBuffer:
        if stride is None:
            stride = cls.stride_for(width)
        buf = cls(width=width, height=height, stride=stride,
                  data=np.zeros(max(stride * height, 0), dtype=np.uint8))
        buf.validate()
        return buf

    @classmethod
    def from_pixels(cls, pixels: np.ndarray, alignment: int = 4) -> CanonicalBuffer:
        """
        Copy an (H, W, 3) uint8 array into a freshly allocated, stride-aligned buffer.
        """
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS or pixels.dtype != np.uint8:
            raise InvalidBuffer(
                f"Expected (H, W, 3) uint8 pixels, got shape {pixels.shape} dtype {pixels.dtype}")
        height, width = pixels.shape[:2]
        buf = cls.allocate(width, height, cls.stride_for(width, alignment))
        buf.pixels[...] = pixels
        return buf

    @classmethod
    def empty_like(cls, other: CanonicalBuffer) -> CanonicalBuffer:
        return cls.allocate(other.width, other.height, other.stride)

    def copy(self) -> CanonicalBuffer:
        return CanonicalBuffer(self.width, self.height, self.stride, self.data.copy())

    # ── Invariants ──────────────────────────────────────────────────
    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidBuffer(f"Buffer dimensions must be positive, got {self.width}x{self.height}")
        if self.stride < self.width * CHANNELS:
            raise InvalidBuffer(
                f"Stride {self.stride} is shorter than a {self.width}-pixel row "
                f"({self.width * CHANNELS} bytes)")
        if not isinstance(self.data, np.ndarray) or self.data.dtype != np.uint8 or self.data.ndim != 1:
            raise InvalidBuffer("Buffer data must be a flat uint8 array")
        if not self.data.flags["C_CONTIGUOUS"]:
            raise InvalidBuffer("Buffer data must be contiguous")
        if self.data.size != self.stride * self.height:
            raise InvalidBuffer(
                f"Buffer holds {self.data.size} bytes, expected stride*height = "
                f"{self.stride * self.height}")

    # ── Access ──────────────────────────────────────────────────────
    @property
    def pixels(self) -> np.ndarray:
        """
        Writable (H, W, 3) view onto `data` that skips the row padding.
        No copy is made; writes land in the buffer.
        """
        self.validate()
        return np.ndarray(shape=(self.height, self.width, CHANNELS),
                          dtype=np.uint8,
                          buffer=self.data,
                          strides=(self.stride, CHANNELS, 1))

    def offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        return y * self.stride + x * CHANNELS

    def pixel_at(self, x: int, y: int) -> Tuple[int, int, int]:
        o = self.offset(x, y)
        r, g, b = self.data[o:o + CHANNELS]
        return int(r), int(g), int(b)
