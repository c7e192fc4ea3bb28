"""
Error kinds raised by the extraction pipeline.

Only DocumentUnreadable is fatal to a run; every other error is contained
inside the processing of a single annotation.
"""


class ExtractionError(Exception):
    """Base class for all extraction errors."""


class DocumentUnreadable(ExtractionError):
    """The annotation document is missing, empty or malformed."""


class UnknownImage(ExtractionError):
    """An annotation references an image id absent from the image index."""

    def __init__(self, annotation_id: int, image_id: int):
        super().__init__(
            f"Image id {image_id} not found for annotation id {annotation_id}"
        )
        self.annotation_id = annotation_id
        self.image_id = image_id


class ImageLoadFailure(ExtractionError):
    """A source image could not be read or decoded."""


class ImageWriteFailure(ExtractionError):
    """A cutout could not be persisted."""


class EmptyRegion(ExtractionError):
    """The polygons of an object cover no pixel inside the image."""
