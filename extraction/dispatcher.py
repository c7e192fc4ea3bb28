"""
Round-robin partitioning and concurrent dispatch of extraction workers.
"""
import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Sequence, TypeVar

from tqdm import tqdm

from data.coco import Annotation
from extraction.worker import ExtractionContext, run_partition

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 8

T = TypeVar("T")


def partition_round_robin(items: Sequence[T], worker_count: int) -> List[List[T]]:
    """
    Split items into `worker_count` disjoint lists; item i goes to list i % worker_count.

    Order within each list follows the input order and list sizes differ by
    at most one.
    """
    if worker_count < 1:
        raise ValueError(f"worker_count must be >= 1, got {worker_count}")
    return [list(items[i::worker_count]) for i in range(worker_count)]


def prepare_output_dir(output_dir) -> Path:
    """Create the output directory once, before any worker starts."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def dispatch(
    annotations: Sequence[Annotation],
    context: ExtractionContext,
    worker_count: int = DEFAULT_WORKERS,
    show_progress: bool = True,
) -> int:
    """
    Run one worker thread per partition and wait for all of them.

    Returns the number of annotations examined, regardless of how many
    produced a cutout; per-annotation skips are only visible in the log.
    """
    partitions = partition_round_robin(annotations, worker_count)
    totals = Counter()
    errors = []

    with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="extract") as pool:
        futures = {
            pool.submit(run_partition, part, context, worker_id): worker_id
            for worker_id, part in enumerate(partitions)
        }
        pbar = tqdm(as_completed(futures), total=len(futures),
                    desc="Partitions", disable=not show_progress)
        for future in pbar:
            try:
                totals.update(future.result())
            except Exception as e:
                logger.exception("Worker %d crashed: %s", futures[future], e)
                errors.append(e)

    if errors:
        raise errors[0]

    summary = ", ".join(f"{k.value}={v}" for k, v in sorted(totals.items(), key=lambda kv: kv[0].value))
    logger.info("Processed %d annotations with %d workers (%s)",
                len(annotations), worker_count, summary or "nothing to do")
    return len(annotations)
