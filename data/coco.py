"""
COCO annotation document loader.

Builds the read-only lookup tables shared by every extraction worker:
image_id -> file_name, category_id -> name, plus the ordered annotation list.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from extraction.errors import DocumentUnreadable

logger = logging.getLogger(__name__)

Point = Tuple[int, int]
Polygon = Tuple[Point, ...]
PolygonSet = Tuple[Polygon, ...]


@dataclass(frozen=True)
class Annotation:
    """One labeled object instance: an outline made of one or more polygons."""
    id: int
    image_id: int
    category_id: int
    polygons: PolygonSet = ()

    @property
    def has_segmentation(self) -> bool:
        return len(self.polygons) > 0


@dataclass(frozen=True)
class CocoIndex:
    image_index: Dict[int, str]
    category_index: Dict[int, str]
    annotations: List[Annotation]


def parse_segmentation(segmentation) -> PolygonSet:
    """
    Convert a COCO polygon segmentation to integer point tuples.

    Args:
        segmentation: list of flat coordinate lists [[x1,y1,x2,y2,...], ...]

    Returns:
        Tuple of polygons. Coordinates are truncated toward zero; an unpaired
        trailing coordinate is dropped. RLE dicts and empty fields give ().
    """
    if not isinstance(segmentation, list):
        return ()
    polygons = []
    for seg in segmentation:
        if not isinstance(seg, (list, tuple)):
            continue
        n = len(seg) - len(seg) % 2
        polygons.append(tuple(
            (int(seg[i]), int(seg[i + 1])) for i in range(0, n, 2)
        ))
    return tuple(polygons)


def _read_document(annotation_path: Path) -> dict:
    try:
        text = annotation_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentUnreadable(f"Cannot open json file: {annotation_path} ({e})") from e
    if not text.strip():
        raise DocumentUnreadable(f"Annotation document is empty: {annotation_path}")
    try:
        coco = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentUnreadable(f"Invalid JSON in {annotation_path}: {e}") from e
    if not isinstance(coco, dict):
        raise DocumentUnreadable(f"Annotation document is not a JSON object: {annotation_path}")
    return coco


def build_indices(coco: dict) -> CocoIndex:
    """Build the lookup tables and annotation list from a parsed document."""
    try:
        image_index = {img["id"]: img["file_name"] for img in coco["images"]}
        category_index = {cat["id"]: cat["name"] for cat in coco["categories"]}
        annotations = [
            Annotation(
                id=ann["id"],
                image_id=ann["image_id"],
                category_id=ann.get("category_id"),
                polygons=parse_segmentation(ann.get("segmentation", [])),
            )
            for ann in coco["annotations"]
        ]
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise DocumentUnreadable(f"Malformed COCO document: missing or invalid {e}") from e
    return CocoIndex(image_index, category_index, annotations)


def load_coco(annotation_path) -> CocoIndex:
    """Read a COCO JSON file. Raises DocumentUnreadable if it cannot be used."""
    annotation_path = Path(annotation_path)
    index = build_indices(_read_document(annotation_path))
    logger.info(
        "Loaded %s: %d images, %d categories, %d annotations",
        annotation_path, len(index.image_index),
        len(index.category_index), len(index.annotations),
    )
    return index
