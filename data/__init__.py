from .coco import Annotation, CocoIndex, load_coco, parse_segmentation

__all__ = ["Annotation", "CocoIndex", "load_coco", "parse_segmentation", "polygons_to_mask"]


def __getattr__(name):
    if name == "polygons_to_mask":
        from .converters.to_mask import polygons_to_mask
        return polygons_to_mask
    raise AttributeError(f"module 'data' has no attribute {name!r}")
