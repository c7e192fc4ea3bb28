"""
Image loading and cutout writing via OpenCV.
"""
from pathlib import Path

import cv2
import numpy as np

from extraction.errors import ImageLoadFailure, ImageWriteFailure


def load_image(path) -> np.ndarray:
    """Read a 3-channel BGR image. Raises ImageLoadFailure if missing or undecodable."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ImageLoadFailure(f"Image load failed: {path}")
    return image


def write_cutout(cutout: np.ndarray, path) -> Path:
    path = Path(path)
    try:
        ok = cv2.imwrite(str(path), cutout)
    except cv2.error as e:
        raise ImageWriteFailure(f"Cannot write {path}: {e}") from e
    if not ok:
        raise ImageWriteFailure(f"Cannot write {path}")
    return path
