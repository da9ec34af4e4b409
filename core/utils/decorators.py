"""
Utility decorators and context managers.
"""

import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator

logger = logging.getLogger(__name__)


@contextmanager
def timer(label: str = "") -> Iterator[Dict[str, float]]:
    """
    Measure wall-clock time of a block.

    The yielded dict gets its "ms" key filled when the block exits,
    so read it after the with statement.

    Example:
        >>> with timer("resample") as t:
        ...     do_work()
        >>> elapsed = t["ms"]
    """
    result: Dict[str, float] = {"ms": 0.0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = round((time.perf_counter() - start) * 1000, 2)
        if label:
            logger.debug(f"{label} took {result['ms']} ms")
