"""Shared fixtures: clean environment and synthetic image files."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest
from PIL import Image as PILImage

SHARPEN_VARS = (
    "SHARPEN_INPUT_DIR",
    "SHARPEN_OUTPUT_DIR",
    "SHARPEN_AMOUNT",
    "SHARPEN_MIN_BYTES",
    "SHARPEN_INPUT_EXT",
    "SHARPEN_CONTINUE_ON_ERROR",
    "SHARPEN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in SHARPEN_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def noise() -> Callable[..., np.ndarray]:
    def _noise(height: int, width: int, channels: int = 3, seed: int = 0) -> np.ndarray:
        rng = np.random.default_rng(seed)
        shape = (height, width) if channels == 1 else (height, width, channels)
        return rng.integers(0, 256, size=shape, dtype=np.uint8)

    return _noise


@pytest.fixture
def write_png() -> Callable[[Path, np.ndarray], Path]:
    def _write(path: Path, pixels: np.ndarray) -> Path:
        PILImage.fromarray(pixels).save(path, format="PNG")
        return path

    return _write
