"""
Bounding regions for annotated objects, clipped to the image extent.
"""
from dataclasses import dataclass
from typing import Tuple

from data.coco import PolygonSet
from extraction.errors import EmptyRegion


@dataclass(frozen=True)
class Region:
    """Axis-aligned rectangle in image pixel coordinates."""
    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def area(self) -> int:
        return 0 if self.is_empty else self.width * self.height

    @property
    def slices(self) -> Tuple[slice, slice]:
        """(rows, cols) slices selecting this region from an (H, W, ...) array."""
        return (slice(self.y, self.y + self.height), slice(self.x, self.x + self.width))

    def intersect(self, other: "Region") -> "Region":
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x + self.width, other.x + other.width)
        y2 = min(self.y + self.height, other.y + other.height)
        return Region(x1, y1, max(0, x2 - x1), max(0, y2 - y1))


def bounding_region(polygons: PolygonSet, image_size: Tuple[int, int]) -> Region:
    """
    Minimal rectangle covering every vertex of every polygon, clipped to the image.

    The rectangle includes its max vertex, so a square with corners at
    10 and 20 yields width 11.

    Args:
        polygons: polygons of one object
        image_size: (width, height)

    Raises:
        EmptyRegion: no vertex at all, or nothing left after clipping.
    """
    xs = [x for poly in polygons for x, _ in poly]
    ys = [y for poly in polygons for _, y in poly]
    if not xs:
        raise EmptyRegion("Polygon set has no vertices")

    x_min, y_min = min(xs), min(ys)
    tight = Region(x_min, y_min, max(xs) - x_min + 1, max(ys) - y_min + 1)
    width, height = image_size
    clipped = tight.intersect(Region(0, 0, width, height))
    if clipped.is_empty:
        raise EmptyRegion(f"Region {tight} lies outside image {width}x{height}")
    return clipped
