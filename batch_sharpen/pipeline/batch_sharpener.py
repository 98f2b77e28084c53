"""
Batch Sharpener Pipeline
Walks a directory of numerically-named images in numeric order, sharpens
every file above the size threshold and copies the small ones untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from tqdm import tqdm

from ..errors import BatchSharpenError
from ..services.image_service import ImageService
from ..services.format_normalizer import FormatNormalizer
from ..services.sharpen_filter import SharpenFilter

logger = logging.getLogger(__name__)

SHARPENED = "sharpened"
COPIED = "copied"
FAILED = "failed"


@dataclass
class FileOutcome:
    source: Path
    destination: Path
    action: str              # sharpened / copied / failed
    error: Optional[str] = None


@dataclass
class BatchReport:
    outcomes: List[FileOutcome] = field(default_factory=list)

    def _count(self, action: str) -> int:
        return sum(1 for o in self.outcomes if o.action == action)

    @property
    def sharpened(self) -> int:
        return self._count(SHARPENED)

    @property
    def copied(self) -> int:
        return self._count(COPIED)

    @property
    def failed(self) -> int:
        return self._count(FAILED)


def sharpen_file(
    src: Union[str, Path],
    dst: Union[str, Path],
    amount: float,
    *,
    image_service: ImageService = ImageService(),
    normalizer: FormatNormalizer = FormatNormalizer(),
    sharpen_filter: SharpenFilter = SharpenFilter(),
) -> None:
    """
    Decode -> normalise -> sharpen -> encode one image.

    Args:
        src: Image to read (any format OpenCV decodes)
        dst: PNG destination
        amount: Sharpen amount `a`
    """
    image = image_service.load(src)
    canonical = normalizer.normalize(image)
    del image

    sharpened = sharpen_filter.apply(canonical, amount)
    del canonical

    image_service.save(sharpened, dst)


def sharpen_directory(
    input_dir: Union[str, Path],
    output_dir: Union[str, Path],
    *,
    amount: float = 0.45,
    min_bytes: int = 150000,
    ext: str = ".png",
    continue_on_error: bool = False,
    show_progress: bool = True,
    image_service: ImageService = ImageService(),
    normalizer: FormatNormalizer = FormatNormalizer(),
    sharpen_filter: SharpenFilter = SharpenFilter(),
) -> BatchReport:
    """
    Process every '<number><ext>' file of `input_dir` into `output_dir`.

    Files smaller than `min_bytes` are copied byte-for-byte; the rest are
    sharpened and written as PNG under the same filename.

    By default the first failing file aborts the run (files already
    written stay). With `continue_on_error` the failure is logged and
    recorded in the report instead.

    Raises:
        NoInputDirectory, NoInputFiles: before anything is written
        InvalidImage, InvalidBuffer, WriteError: fail-fast mode only
    """
    paths = image_service.select_inputs(input_dir, ext)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Sharpening {len(paths)} files from {input_dir} into {output_dir} "
                f"(amount={amount}, min_bytes={min_bytes})")

    report = BatchReport()
    for src in tqdm(paths, desc="sharpen", ncols=70, disable=not show_progress):
        dst = output_dir / src.name
        try:
            if image_service.file_size(src) < min_bytes:
                image_service.copy(src, dst)
                action = COPIED
            else:
                sharpen_file(src, dst, amount,
                             image_service=image_service,
                             normalizer=normalizer,
                             sharpen_filter=sharpen_filter)
                action = SHARPENED
        except (BatchSharpenError, OSError) as err:
            if not continue_on_error:
                raise
            logger.error(f"Skipping {src.name}: {err}")
            report.outcomes.append(FileOutcome(src, dst, FAILED, str(err)))
            continue

        logger.info(f"{action.capitalize()}: {src.name}")
        report.outcomes.append(FileOutcome(src, dst, action))

    logger.info(f"Done: {report.sharpened} sharpened, {report.copied} copied, "
                f"{report.failed} failed")
    return report
