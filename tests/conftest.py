import json

import cv2
import numpy as np
import pytest

from extraction.worker import ExtractionContext


@pytest.fixture
def gradient_image():
    """100x100 BGR image where every pixel has a distinct-ish color."""
    ys, xs = np.mgrid[0:100, 0:100]
    image = np.stack([xs * 2, ys * 2, (xs + ys) % 256], axis=-1).astype(np.uint8)
    return image


@pytest.fixture
def image_dir(tmp_path, gradient_image):
    d = tmp_path / "images"
    d.mkdir()
    cv2.imwrite(str(d / "scene.png"), gradient_image)
    return d


@pytest.fixture
def output_dir(tmp_path):
    d = tmp_path / "masks"
    d.mkdir()
    return d


@pytest.fixture
def context(image_dir, output_dir):
    return ExtractionContext(
        image_index={1: "scene.png", 2: "missing.png"},
        category_index={1: "bottle", 2: "can"},
        image_dir=image_dir,
        output_dir=output_dir,
    )


@pytest.fixture
def coco_doc():
    return {
        "images": [{"id": 1, "file_name": "scene.png"}],
        "categories": [{"id": 1, "name": "bottle"}, {"id": 2, "name": "can"}],
        "annotations": [
            {"id": 10, "image_id": 1, "category_id": 1,
             "segmentation": [[10, 10, 10, 20, 20, 20, 20, 10]]},
            {"id": 11, "image_id": 99, "category_id": 1,
             "segmentation": [[10, 10, 10, 20, 20, 20, 20, 10]]},
            {"id": 12, "image_id": 1, "category_id": 2, "segmentation": []},
            {"id": 13, "image_id": 1, "category_id": 2,
             "segmentation": [[5, 5, 5, 15, 15, 15, 15, 5], [60, 70, 60, 80, 80, 80, 80, 70]]},
        ],
    }


@pytest.fixture
def coco_path(tmp_path, coco_doc):
    path = tmp_path / "annotations.json"
    path.write_text(json.dumps(coco_doc))
    return path
