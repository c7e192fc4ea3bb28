"""
COCO polygon annotations → binary object masks.
Utility functions used by the extraction worker.
"""
from fractions import Fraction
from typing import List, Sequence, Tuple

import numpy as np
import cv2

from data.coco import Point, Polygon, PolygonSet, parse_segmentation

# Vertices farther than this from the image are clipped before filling;
# OpenCV works on 32-bit points.
CLIP_MARGIN = 2 ** 20


def _clip_polygon(poly: Polygon, x_min: int, y_min: int, x_max: int, y_max: int) -> List[Point]:
    """Sutherland-Hodgman clip against an axis-aligned box, in exact integer math."""
    pts = list(poly)
    for axis, bound, keep_above in ((0, x_min, True), (0, x_max, False),
                                    (1, y_min, True), (1, y_max, False)):
        def inside(p):
            return p[axis] >= bound if keep_above else p[axis] <= bound

        def crossing(p, q):
            other = p[1 - axis] + Fraction((bound - p[axis]) * (q[1 - axis] - p[1 - axis]),
                                           q[axis] - p[axis])
            return (bound, round(other)) if axis == 0 else (round(other), bound)

        clipped = []
        for i, cur in enumerate(pts):
            prev = pts[i - 1]
            if inside(cur):
                if not inside(prev):
                    clipped.append(crossing(prev, cur))
                clipped.append(cur)
            elif inside(prev):
                clipped.append(crossing(prev, cur))
        pts = clipped
        if not pts:
            break
    return pts


def polygons_to_mask(polygons: PolygonSet, size: Tuple[int, int]) -> np.ndarray:
    """
    Rasterize a set of polygons into one boolean mask.

    Each polygon is filled on its own layer and OR-ed into the result, so
    the union does not depend on polygon order. Inside a single polygon the
    fill is even-odd: regions enclosed twice by a self-intersecting outline
    (the core of a pentagram) stay empty. Boundary pixels are filled.

    Args:
        polygons: sequence of polygons, each a sequence of (x, y) points
        size: (width, height) of the source image

    Returns:
        Boolean mask (H, W). Vertices outside the image are allowed; only
        in-bounds cells are marked. Far-away vertices are clipped to a
        margin around the image first, which leaves the in-image fill unchanged.
    """
    width, height = size
    mask = np.zeros((height, width), dtype=bool)
    layer = np.zeros((height, width), dtype=np.uint8)
    lo_x, lo_y = -CLIP_MARGIN, -CLIP_MARGIN
    hi_x, hi_y = width + CLIP_MARGIN, height + CLIP_MARGIN
    for poly in polygons:
        if len(poly) < 3:
            continue
        if any(not (lo_x <= x <= hi_x and lo_y <= y <= hi_y) for x, y in poly):
            poly = _clip_polygon(poly, lo_x, lo_y, hi_x, hi_y)
            if len(poly) < 3:
                continue
        pts = np.asarray(poly, dtype=np.int32).reshape(-1, 1, 2)
        layer[:] = 0
        cv2.fillPoly(layer, [pts], 1)
        mask |= layer.astype(bool)
    return mask


def segmentation_to_mask(segmentation: Sequence, height: int, width: int) -> np.ndarray:
    """Convert raw COCO segmentation lists [[x1,y1,x2,y2,...], ...] to a mask (H, W)."""
    return polygons_to_mask(parse_segmentation(list(segmentation)), (width, height))
