"""
Extract every annotated object of a COCO dataset as a transparent PNG cutout.

Usage:
    python scripts/extract_objects.py
    python scripts/extract_objects.py --config configs/base.yaml
    python scripts/extract_objects.py --images data/images --annotation data/annotations.json --output outputs/masks --workers 8
"""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from data.coco import load_coco
from extraction.config import load_config, resolve_worker_count
from extraction.dispatcher import dispatch, prepare_output_dir
from extraction.errors import DocumentUnreadable
from extraction.worker import ExtractionContext

logger = logging.getLogger("extract_objects")

LOG_FORMAT = "%(asctime)s [%(threadName)s] %(levelname)s %(name)s: %(message)s"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Cut out COCO polygon objects as RGBA PNGs")
    parser.add_argument("--config", default=None, help="YAML config (default: built-in defaults)")
    parser.add_argument("--images", default=None, help="Source image directory")
    parser.add_argument("--annotation", default=None, help="COCO annotation JSON")
    parser.add_argument("--output", default=None, help="Directory for the cutouts")
    parser.add_argument("--workers", default=None, help="Worker threads, or 'auto'")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    config = load_config(args.config)
    images_dir = Path(args.images or config["data"]["images_dir"])
    annotation_path = Path(args.annotation or config["data"]["annotation"])
    output_dir = Path(args.output or config["output"]["dir"])
    worker_count = resolve_worker_count(args.workers or config["workers"]["count"])

    try:
        coco = load_coco(annotation_path)
    except DocumentUnreadable as e:
        logger.error("%s", e)
        return 1

    context = ExtractionContext(
        image_index=coco.image_index,
        category_index=coco.category_index,
        image_dir=images_dir,
        output_dir=prepare_output_dir(output_dir),
    )
    total = dispatch(coco.annotations, context, worker_count,
                     show_progress=not args.no_progress)
    print(f"Done: {total} objects extracted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
