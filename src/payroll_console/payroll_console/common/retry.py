from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from ..core.exceptions import TransientIOError

log = logging.getLogger(__name__)

T = TypeVar("T")


def retry_read(fn: Callable[[], T], *, attempts: int, backoff: float, sleep: Callable[[float], None] = time.sleep) -> T:
    """Run an idempotent read, retrying on TransientIOError.

    Only reads go through here: a failed write must surface as "not saved".
    """
    attempts = max(int(attempts), 1)
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except TransientIOError as e:
            if attempt >= attempts:
                raise
            log.warning("read failed (attempt %s/%s): %s", attempt, attempts, e)
            sleep(backoff * attempt)
    raise AssertionError("unreachable")
