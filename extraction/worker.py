"""
Batch worker: turns each annotation of one partition into a PNG cutout.

Every failure is contained to the annotation that caused it; the worker
logs it, counts it and moves on.
"""
import enum
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable

from data.coco import Annotation
from data.converters.to_mask import polygons_to_mask
from extraction.cutout import composite
from extraction.errors import EmptyRegion, ImageLoadFailure, ImageWriteFailure, UnknownImage
from extraction.image_io import load_image, write_cutout
from extraction.regions import bounding_region
from extraction.resolver import output_name, resolve

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    SAVED = "saved"
    UNKNOWN_IMAGE = "unknown_image"
    IMAGE_LOAD_FAILURE = "image_load_failure"
    NO_SEGMENTATION = "no_segmentation"
    EMPTY_REGION = "empty_region"
    WRITE_FAILURE = "write_failure"


@dataclass(frozen=True)
class ExtractionContext:
    """Read-only inputs shared by all workers."""
    image_index: Dict[int, str]
    category_index: Dict[int, str]
    image_dir: Path
    output_dir: Path


def extract_annotation(annotation: Annotation, context: ExtractionContext) -> Outcome:
    try:
        image_path, label = resolve(
            annotation, context.image_index, context.category_index, context.image_dir
        )
    except UnknownImage as e:
        logger.warning("%s", e)
        return Outcome.UNKNOWN_IMAGE

    try:
        image = load_image(image_path)
    except ImageLoadFailure as e:
        logger.warning("%s (annotation id %s)", e, annotation.id)
        return Outcome.IMAGE_LOAD_FAILURE

    if not annotation.has_segmentation:
        logger.debug("Annotation %s has no segmentation", annotation.id)
        return Outcome.NO_SEGMENTATION

    height, width = image.shape[:2]
    try:
        region = bounding_region(annotation.polygons, (width, height))
    except EmptyRegion as e:
        logger.debug("Skipping annotation %s: %s", annotation.id, e)
        return Outcome.EMPTY_REGION
    mask = polygons_to_mask(annotation.polygons, (width, height))

    cutout = composite(image, mask, region)
    out_path = context.output_dir / output_name(label, annotation.id)
    try:
        write_cutout(cutout, out_path)
    except ImageWriteFailure as e:
        logger.warning("%s", e)
        return Outcome.WRITE_FAILURE
    logger.info("Saved: %s", out_path)
    return Outcome.SAVED


def run_partition(
    partition: Iterable[Annotation],
    context: ExtractionContext,
    worker_id: int = 0,
) -> Counter:
    """Process one partition sequentially, in order. Returns outcome counts."""
    counts = Counter()
    for annotation in partition:
        counts[extract_annotation(annotation, context)] += 1
    logger.debug("Worker %d finished: %s", worker_id, dict(counts))
    return counts
