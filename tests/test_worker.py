import dataclasses
import logging

import cv2
import numpy as np

from data.coco import Annotation
from extraction.worker import Outcome, extract_annotation, run_partition

SQUARE = ((10, 10), (10, 20), (20, 20), (20, 10))


def _read(path):
    return cv2.imread(str(path), cv2.IMREAD_UNCHANGED)


def test_square_annotation_becomes_opaque_cutout(context, output_dir, gradient_image):
    outcome = extract_annotation(Annotation(10, 1, 1, (SQUARE,)), context)

    assert outcome is Outcome.SAVED
    cutout = _read(output_dir / "bottle_10.png")
    assert cutout.shape == (11, 11, 4)
    assert (cutout[..., 3] == 255).all()
    assert np.array_equal(cutout[..., :3], gradient_image[10:21, 10:21])


def test_two_polygons_cover_union_bounding_box(context, output_dir):
    polys = (((5, 5), (5, 15), (15, 15), (15, 5)), ((60, 70), (60, 80), (80, 80), (80, 70)))
    assert extract_annotation(Annotation(13, 1, 2, polys), context) is Outcome.SAVED

    cutout = _read(output_dir / "can_13.png")
    assert cutout.shape == (76, 76, 4)
    alpha = cutout[..., 3] == 255
    expected = np.zeros((76, 76), dtype=bool)
    expected[0:11, 0:11] = True
    expected[65:76, 55:76] = True
    assert np.array_equal(alpha, expected)
    assert not cutout[~alpha].any()


def test_unknown_image_is_logged_and_skipped(context, output_dir, caplog):
    with caplog.at_level(logging.WARNING):
        outcome = extract_annotation(Annotation(11, 99, 1, (SQUARE,)), context)
    assert outcome is Outcome.UNKNOWN_IMAGE
    assert "Image id 99 not found for annotation id 11" in caplog.text
    assert list(output_dir.iterdir()) == []


def test_missing_image_file_is_skipped(context, output_dir, caplog):
    with caplog.at_level(logging.WARNING):
        outcome = extract_annotation(Annotation(14, 2, 1, (SQUARE,)), context)
    assert outcome is Outcome.IMAGE_LOAD_FAILURE
    assert "missing.png" in caplog.text
    assert list(output_dir.iterdir()) == []


def test_empty_segmentation_is_silent(context, output_dir, caplog):
    with caplog.at_level(logging.WARNING):
        outcome = extract_annotation(Annotation(12, 1, 2, ()), context)
    assert outcome is Outcome.NO_SEGMENTATION
    assert caplog.text == ""
    assert list(output_dir.iterdir()) == []


def test_polygon_outside_image_is_skipped(context, output_dir):
    poly = ((200, 200), (210, 200), (210, 210))
    assert extract_annotation(Annotation(15, 1, 1, (poly,)), context) is Outcome.EMPTY_REGION
    assert list(output_dir.iterdir()) == []


def test_unknown_category_uses_fallback_name(context, output_dir):
    assert extract_annotation(Annotation(16, 1, 77, (SQUARE,)), context) is Outcome.SAVED
    assert (output_dir / "unknown_16.png").exists()


def test_write_failure_does_not_stop_the_partition(context, tmp_path):
    broken = dataclasses.replace(context, output_dir=tmp_path / "does" / "not" / "exist")
    counts = run_partition(
        [Annotation(1, 1, 1, (SQUARE,)), Annotation(2, 1, 1, ())], broken
    )
    assert counts[Outcome.WRITE_FAILURE] == 1
    assert counts[Outcome.NO_SEGMENTATION] == 1


def test_run_partition_counts_every_annotation(context):
    partition = [
        Annotation(1, 1, 1, (SQUARE,)),
        Annotation(2, 99, 1, (SQUARE,)),
        Annotation(3, 1, 1, ()),
        Annotation(4, 2, 1, (SQUARE,)),
    ]
    counts = run_partition(partition, context, worker_id=3)
    assert sum(counts.values()) == 4
    assert counts[Outcome.SAVED] == 1
    assert counts[Outcome.UNKNOWN_IMAGE] == 1
    assert counts[Outcome.NO_SEGMENTATION] == 1
    assert counts[Outcome.IMAGE_LOAD_FAILURE] == 1


def test_huge_coordinate_does_not_stop_the_partition(context, output_dir):
    far = ((10, 10), (10_000_000_000, 10), (10, 20))
    counts = run_partition(
        [Annotation(1, 1, 1, (far,)), Annotation(2, 1, 1, (SQUARE,))], context
    )
    assert counts[Outcome.SAVED] == 2
    cutout = _read(output_dir / "bottle_1.png")
    assert cutout.shape == (11, 90, 4)
    assert (cutout[:10, :, 3] == 255).all()
    assert (output_dir / "bottle_2.png").exists()


def test_degenerate_polygons_give_transparent_cutout(context, output_dir):
    line = ((5, 5), (8, 8))
    assert extract_annotation(Annotation(17, 1, 1, (line,)), context) is Outcome.SAVED
    cutout = _read(output_dir / "bottle_17.png")
    assert cutout.shape == (4, 4, 4)
    assert not cutout.any()


def test_polygon_clipped_at_image_origin_stays_aligned(context, output_dir, gradient_image):
    poly = ((-5, -5), (-5, 9), (9, 9), (9, -5))
    assert extract_annotation(Annotation(18, 1, 1, (poly,)), context) is Outcome.SAVED
    cutout = _read(output_dir / "bottle_18.png")
    assert cutout.shape == (10, 10, 4)
    assert (cutout[..., 3] == 255).all()
    assert np.array_equal(cutout[..., :3], gradient_image[0:10, 0:10])
