"""
Cutout compositing: crop an object out of its image with a transparent background.
"""
import numpy as np

from extraction.regions import Region


def composite(image: np.ndarray, mask: np.ndarray, region: Region) -> np.ndarray:
    """
    Build a 4-channel cutout of `region`.

    Pixels under the mask keep their color with alpha 255; every other pixel
    is (0, 0, 0, 0). Channel order follows `image`, so a BGR image from
    cv2.imread yields BGRA ready for cv2.imwrite.

    Args:
        image: (H, W, 3) uint8
        mask: (H, W) bool or 0/1 array
        region: crop rectangle, inside the image

    Returns:
        New (region.height, region.width, 4) uint8 array.
    """
    if mask.shape[:2] != image.shape[:2]:
        raise ValueError(f"Mask shape {mask.shape} does not match image shape {image.shape}")
    h, w = image.shape[:2]
    if region.is_empty or region.x < 0 or region.y < 0 \
            or region.x + region.width > w or region.y + region.height > h:
        raise ValueError(f"Region {region} is not inside image {w}x{h}")

    rows, cols = region.slices
    crop = image[rows, cols]
    occupied = mask[rows, cols].astype(bool)

    out = np.zeros((region.height, region.width, 4), dtype=np.uint8)
    out[occupied, :3] = crop[occupied, :3]
    out[occupied, 3] = 255
    return out
