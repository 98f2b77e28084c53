class BatchSharpenError(Exception):
    """Base class for every failure raised by the batch sharpener."""


class InvalidImage(BatchSharpenError, ValueError):
    """A file could not be decoded, or a decoded image cannot be rendered."""


class InvalidBuffer(BatchSharpenError, ValueError):
    """A canonical buffer breaks its layout invariants."""


class WriteError(BatchSharpenError, OSError):
    """An output file could not be encoded or written."""


class NoInputDirectory(BatchSharpenError, NotADirectoryError):
    """The input directory does not exist."""


class NoInputFiles(BatchSharpenError, FileNotFoundError):
    """The input directory holds no numerically-named images."""


class ConfigError(BatchSharpenError, ValueError):
    """A configuration value is missing or malformed."""
