from pathlib import Path
from typing import List, Union

from ..models.image import Image
from ..models.canonical_buffer import CanonicalBuffer
from ..repositories.image_repository import ImageRepository


class ImageService:
    """I/O helpers for the batch pipeline.  No pixel math."""
    def __init__(self):
        self.image_repository = ImageRepository()

    def load(self, path: Union[str, Path]) -> Image:
        """Decode a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def save(self, buffer: CanonicalBuffer, path: Union[str, Path]) -> None:
        """
        Business-level method to write a canonical buffer as PNG.
        """
        self.image_repository.save(buffer, path)

    def copy(self, src: Union[str, Path], dst: Union[str, Path]) -> None:
        self.image_repository.copy_raw(src, dst)

    def file_size(self, path: Union[str, Path]) -> int:
        return self.image_repository.file_size(path)

    def select_inputs(self, folder: Union[str, Path], ext: str = ".png") -> List[Path]:
        """
        Numerically-named images in `folder`, sorted by their number.
        """
        return self.image_repository.list_numbered(folder, ext)
