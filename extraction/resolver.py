"""
Annotation → (source image path, category label) lookup.
"""
import re
from pathlib import Path
from typing import Dict, NamedTuple

from data.coco import Annotation
from extraction.errors import UnknownImage

UNKNOWN_LABEL = "unknown"

_UNSAFE_CHARS = re.compile(r"[^\w.\- ]")


class ResolvedAnnotation(NamedTuple):
    image_path: Path
    category_label: str


def sanitize_label(name: str) -> str:
    """Make a category name usable as a file-name component."""
    label = _UNSAFE_CHARS.sub("_", str(name)).strip()
    return label or UNKNOWN_LABEL


def output_name(category_label: str, annotation_id: int) -> str:
    return f"{category_label}_{annotation_id}.png"


def resolve(
    annotation: Annotation,
    image_index: Dict[int, str],
    category_index: Dict[int, str],
    image_dir=".",
) -> ResolvedAnnotation:
    """
    Look up the source image and label of an annotation.

    An unknown category falls back to "unknown"; only an unknown image id
    raises UnknownImage, since without it there are no pixels to cut.
    """
    file_name = image_index.get(annotation.image_id)
    if file_name is None:
        raise UnknownImage(annotation.id, annotation.image_id)
    name = category_index.get(annotation.category_id)
    label = UNKNOWN_LABEL if name is None else sanitize_label(name)
    return ResolvedAnnotation(Path(image_dir) / file_name, label)
