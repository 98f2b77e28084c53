from pathlib import Path
from typing import Union, List
import logging
import re
import shutil

import cv2
import numpy as np
from PIL import Image as PILImage

from ..errors import InvalidImage, WriteError, NoInputDirectory, NoInputFiles
from ..models.image import Image
from ..models.canonical_buffer import CanonicalBuffer

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for Image entities and canonical buffers.
    No pixel math in here.
    """

    @staticmethod
    def load(path: Union[str, Path]) -> Image:
        path = Path(path)
        if not path.is_file():
            raise InvalidImage(f"Image not found: {path}")

        # IMREAD_UNCHANGED keeps alpha and 16-bit depth for the normalizer
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None or arr.size == 0:
            raise InvalidImage(f"Image unreadable: {path}")

        if arr.ndim == 3 and arr.shape[2] == 3:
            arr = cv2.cvtColor(arr, cv2.COLOR_BGR2RGB)
        elif arr.ndim == 3 and arr.shape[2] == 4:
            arr = cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        return Image(pixels=arr, path=path)

    @staticmethod
    def save(buffer: CanonicalBuffer, path: Union[str, Path]) -> None:
        """Encode the buffer as PNG, whatever the destination suffix says."""
        path = Path(path)
        np_img = buffer.pixels
        if not np_img.flags['C_CONTIGUOUS']:  # padded stride
            np_img = np.ascontiguousarray(np_img)
        try:
            PILImage.fromarray(np_img).save(path, format="PNG")
        except (OSError, ValueError) as err:
            raise WriteError(f"Could not write {path}: {err}") from err

    @staticmethod
    def copy_raw(src: Union[str, Path], dst: Union[str, Path]) -> None:
        try:
            shutil.copyfile(src, dst)
        except OSError as err:
            raise WriteError(f"Could not copy {src} to {dst}: {err}") from err

    @staticmethod
    def file_size(path: Union[str, Path]) -> int:
        return Path(path).stat().st_size

    @staticmethod
    def list_numbered(folder: Union[str, Path], ext: str = ".png") -> List[Path]:
        """
        Files named '<digits><ext>' directly inside `folder`, in ascending
        numeric order (10.png comes after 2.png).
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NoInputDirectory(f"Input directory does not exist: {folder}")

        pattern = re.compile(rf"([0-9]+){re.escape(ext)}", re.IGNORECASE)
        numbered = []
        for p in folder.iterdir():
            match = pattern.fullmatch(p.name)
            if match is None:
                logger.debug(f"Skipping, name does not match: {p.name}")
                continue
            if not p.is_file():
                logger.debug(f"Skipping because not file: {p}")
                continue
            numbered.append((int(match.group(1)), p.name, p))

        if not numbered:
            raise NoInputFiles(f"No files matching <number>{ext} in {folder}")

        numbered.sort()
        return [p for _, _, p in numbered]
