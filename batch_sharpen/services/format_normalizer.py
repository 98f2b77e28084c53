import logging

import cv2
import numpy as np

from ..errors import InvalidImage
from ..models.image import Image
from ..models.canonical_buffer import CanonicalBuffer

logger = logging.getLogger(__name__)


class FormatNormalizer:
    """
    Turns a decoded Image of any supported layout into a CanonicalBuffer
    (RGB, 8 bits per channel, no alpha) of the same width and height.
    Nothing is ever resized, so only the colour model changes.
    """

    def normalize(self, image: Image) -> CanonicalBuffer:
        pixels = image.pixels
        if pixels is None or pixels.ndim not in (2, 3) or pixels.size == 0:
            raise InvalidImage(f"Cannot render image {image.path}: empty or malformed pixel array")

        if self._is_canonical(pixels):
            # exact duplicate, no conversion
            return CanonicalBuffer.from_pixels(pixels)

        logger.debug(f"Converting {image.pixel_format} {image.width}x{image.height} to rgb24: {image.path}")
        return CanonicalBuffer.from_pixels(self._render_rgb24(image))

    @staticmethod
    def _is_canonical(pixels: np.ndarray) -> bool:
        return pixels.dtype == np.uint8 and pixels.ndim == 3 and pixels.shape[2] == 3

    def _render_rgb24(self, image: Image) -> np.ndarray:
        pixels = image.pixels
        if pixels.ndim == 3 and pixels.shape[2] == 1:
            pixels = pixels[:, :, 0]

        channels = 1 if pixels.ndim == 2 else pixels.shape[2]
        if channels not in (1, 3, 4):
            raise InvalidImage(f"Unsupported channel count {channels} in {image.path}")

        pixels = self._to_8bit(pixels, image)

        if channels == 1:
            return cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGB)
        if channels == 4:
            return self._composite_over_black(pixels)
        return np.ascontiguousarray(pixels)

    @staticmethod
    def _to_8bit(pixels: np.ndarray, image: Image) -> np.ndarray:
        if pixels.dtype == np.uint8:
            return pixels
        if pixels.dtype == np.uint16:
            # 65535 -> 255, rounded
            return cv2.convertScaleAbs(pixels, alpha=1.0 / 257.0)
        if pixels.dtype in (np.float32, np.float64):
            scaled = np.clip(np.nan_to_num(pixels), 0.0, 1.0) * 255.0 + 0.5
            return scaled.astype(np.uint8)
        raise InvalidImage(f"Unsupported sample type {pixels.dtype} in {image.path}")

    @staticmethod
    def _composite_over_black(rgba: np.ndarray) -> np.ndarray:
        """
        Flatten RGBA onto the black background of a fresh 24-bit surface:
        out = rgb * alpha / 255, rounded.
        """
        rgb = rgba[:, :, :3].astype(np.uint16)
        alpha = rgba[:, :, 3:4].astype(np.uint16)
        return ((rgb * alpha + 127) // 255).astype(np.uint8)
