"""Exception types raised while building an atlas."""


class AtlasError(Exception):
    """Base class for every fatal atlas build failure."""


class ImageLoadError(AtlasError):
    """An input file could not be found, read or decoded."""


class PackingError(AtlasError):
    """An image could not be placed on the canvas."""

    def __init__(self, image_name: str, message: str) -> None:
        super().__init__(f"{image_name}: {message}")
        self.image_name = image_name


class CompositionError(AtlasError):
    """A placement does not fit the composited pixel buffer."""


class RecordFormatError(AtlasError, ValueError):
    """An atlas.data blob is malformed."""


class ArchiveWriteError(AtlasError):
    """The output archive could not be written."""


class ArchiveReadError(AtlasError):
    """An existing archive is missing entries or unreadable."""
