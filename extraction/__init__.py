from .errors import (
    ExtractionError,
    DocumentUnreadable,
    UnknownImage,
    ImageLoadFailure,
    ImageWriteFailure,
    EmptyRegion,
)

__all__ = [
    "ExtractionError", "DocumentUnreadable", "UnknownImage",
    "ImageLoadFailure", "ImageWriteFailure", "EmptyRegion",
    "Region", "bounding_region", "composite", "resolve",
    "ExtractionContext", "run_partition", "partition_round_robin", "dispatch",
]


def __getattr__(name):
    if name in ("Region", "bounding_region"):
        from . import regions
        return getattr(regions, name)
    if name == "composite":
        from .cutout import composite
        return composite
    if name == "resolve":
        from .resolver import resolve
        return resolve
    if name in ("ExtractionContext", "run_partition"):
        from . import worker
        return getattr(worker, name)
    if name in ("partition_round_robin", "dispatch"):
        from . import dispatcher
        return getattr(dispatcher, name)
    raise AttributeError(f"module 'extraction' has no attribute {name!r}")
