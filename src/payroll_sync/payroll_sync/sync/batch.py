from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def process_in_batches(
    items: Sequence[T],
    batch_size: int,
    work: Callable[[T], object],
    on_progress: Optional[ProgressCallback] = None,
) -> None:
    """Run `work` over `items` in contiguous chunks of `batch_size`.

    Items within a chunk run concurrently and the whole chunk settles before
    the next one starts. The first failure of a chunk, in item order, is
    raised after the chunk settles and no later chunk runs.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be a positive integer")

    items = list(items)
    total = math.ceil(len(items) / batch_size)
    if total == 0:
        return

    with ThreadPoolExecutor(max_workers=batch_size) as pool:
        for index in range(total):
            chunk = items[index * batch_size:(index + 1) * batch_size]
            futures = [pool.submit(work, item) for item in chunk]
            wait(futures)
            for future in futures:
                future.result()

            logger.debug("batch %s/%s done (%s items)", index + 1, total, len(chunk))
            if on_progress:
                on_progress(f"Processed batch {index + 1} of {total}")
