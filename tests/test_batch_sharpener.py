"""End-to-end tests for the directory pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

from batch_sharpen.errors import InvalidImage, NoInputDirectory, NoInputFiles
from batch_sharpen.models.canonical_buffer import CanonicalBuffer
from batch_sharpen.pipeline.batch_sharpener import (
    COPIED,
    FAILED,
    SHARPENED,
    sharpen_directory,
    sharpen_file,
)
from batch_sharpen.services.sharpen_filter import SharpenFilter


def _read(path: Path) -> np.ndarray:
    with PILImage.open(path) as img:
        return np.asarray(img.convert("RGB"))


def test_threshold_bypass_end_to_end(tmp_path: Path, noise, write_png) -> None:
    src_dir, out_dir = tmp_path / "in", tmp_path / "out"
    src_dir.mkdir()
    small = write_png(src_dir / "1.png", noise(200, 200, seed=1))
    large_pixels = noise(300, 300, seed=2)
    large = write_png(src_dir / "2.png", large_pixels)
    assert small.stat().st_size < 150000 <= large.stat().st_size

    report = sharpen_directory(src_dir, out_dir, amount=0.45, min_bytes=150000, show_progress=False)

    assert [o.action for o in report.outcomes] == [COPIED, SHARPENED]
    assert (out_dir / "1.png").read_bytes() == small.read_bytes()

    written = _read(out_dir / "2.png")
    assert written.shape == large_pixels.shape
    np.testing.assert_array_equal(written[0], large_pixels[0])
    np.testing.assert_array_equal(written[:, -1], large_pixels[:, -1])
    assert not np.array_equal(written[1:-1, 1:-1], large_pixels[1:-1, 1:-1])

    expected = SharpenFilter().apply(CanonicalBuffer.from_pixels(large_pixels), 0.45)
    np.testing.assert_array_equal(written, expected.pixels)


def test_files_are_processed_in_numeric_order(tmp_path: Path, noise, write_png, caplog) -> None:
    src_dir = tmp_path / "in"
    src_dir.mkdir()
    for seed, name in enumerate(["10.png", "2.png", "1.png"]):
        write_png(src_dir / name, noise(4, 4, seed=seed))

    with caplog.at_level(logging.INFO, logger="batch_sharpen.pipeline.batch_sharpener"):
        report = sharpen_directory(src_dir, tmp_path / "out", min_bytes=0, show_progress=False)

    assert [o.source.name for o in report.outcomes] == ["1.png", "2.png", "10.png"]
    logged = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Sharpened")]
    assert logged == ["Sharpened: 1.png", "Sharpened: 2.png", "Sharpened: 10.png"]


def test_output_directory_is_created_with_parents(tmp_path: Path, noise, write_png) -> None:
    src_dir = tmp_path / "in"
    src_dir.mkdir()
    write_png(src_dir / "1.png", noise(3, 3))
    out_dir = tmp_path / "a" / "b" / "enhanced"

    sharpen_directory(src_dir, out_dir, min_bytes=0, show_progress=False)

    assert (out_dir / "1.png").is_file()


def test_non_png_input_keeps_name_but_is_written_as_png(tmp_path: Path, noise) -> None:
    src_dir = tmp_path / "in"
    src_dir.mkdir()
    PILImage.fromarray(noise(8, 8)).save(src_dir / "1.bmp", format="BMP")

    report = sharpen_directory(src_dir, tmp_path / "out", ext=".bmp", min_bytes=0, show_progress=False)

    assert report.sharpened == 1
    with PILImage.open(tmp_path / "out" / "1.bmp") as written:
        assert written.format == "PNG"


def test_first_failure_aborts_the_run(tmp_path: Path, noise, write_png) -> None:
    src_dir, out_dir = tmp_path / "in", tmp_path / "out"
    src_dir.mkdir()
    write_png(src_dir / "1.png", noise(4, 4))
    (src_dir / "2.png").write_bytes(b"broken" * 100)
    write_png(src_dir / "3.png", noise(4, 4, seed=3))

    with pytest.raises(InvalidImage):
        sharpen_directory(src_dir, out_dir, min_bytes=0, show_progress=False)

    assert (out_dir / "1.png").is_file()
    assert not (out_dir / "3.png").exists()


def test_continue_on_error_records_and_skips(tmp_path: Path, noise, write_png) -> None:
    src_dir, out_dir = tmp_path / "in", tmp_path / "out"
    src_dir.mkdir()
    write_png(src_dir / "1.png", noise(4, 4))
    (src_dir / "2.png").write_bytes(b"broken" * 100)
    write_png(src_dir / "3.png", noise(4, 4, seed=3))

    report = sharpen_directory(src_dir, out_dir, min_bytes=0, continue_on_error=True, show_progress=False)

    assert [o.action for o in report.outcomes] == [SHARPENED, FAILED, SHARPENED]
    assert report.failed == 1
    assert "2.png" in report.outcomes[1].error
    assert (out_dir / "3.png").is_file()
    assert not (out_dir / "2.png").exists()


def test_missing_input_directory_writes_nothing(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"

    with pytest.raises(NoInputDirectory):
        sharpen_directory(tmp_path / "absent", out_dir, show_progress=False)

    assert not out_dir.exists()


def test_no_numbered_files_fails_the_run(tmp_path: Path) -> None:
    (tmp_path / "readme.txt").write_text("hi")

    with pytest.raises(NoInputFiles):
        sharpen_directory(tmp_path, tmp_path / "out", show_progress=False)


def test_sharpen_file_converts_alpha_images(tmp_path: Path, noise, write_png) -> None:
    rgba = noise(5, 5, channels=4)
    rgba[:, :, 3] = 255
    src = write_png(tmp_path / "1.png", rgba)

    sharpen_file(src, tmp_path / "out.png", 0.0)

    np.testing.assert_array_equal(_read(tmp_path / "out.png"), rgba[:, :, :3])
