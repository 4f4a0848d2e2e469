from __future__ import annotations

import threading

from ..core.exceptions import OperationCancelled


class CancellationToken:
    """Cooperative cancellation flag shared between a request and a long use case.

    The caller keeps the token and calls cancel() when the triggering context
    goes away; the use case calls raise_if_cancelled() between its steps.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason = ""

    def cancel(self, reason: str = "cancelled") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled(self.reason or "cancelled")


NEVER_CANCELLED = CancellationToken()
