"""
Upload progress tracking.

Turns raw transferred-byte callbacks into percentages for UI feedback.
Progress is best effort: it never goes backwards and never exceeds 100,
even when the transport re-sends data on retries.

Dependencies: None
System role: Side-channel progress reporting for uploads
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class ProgressTracker:
    """
    Accumulates transferred bytes and reports monotonic percentages.

    Instances are callable so they can be handed directly to transfer
    APIs that report byte increments (e.g. boto3's `Callback`).
    """

    def __init__(self, total: int | None, callback: ProgressCallback | None = None) -> None:
        """
        Initialize tracker.

        Args:
            total: Expected byte count (None or 0 when unknown)
            callback: Receives each new integer percentage
        """
        self.total = total or 0
        self.transferred = 0
        self.percent = 0
        self._callback = callback

    def __call__(self, bytes_amount: int) -> None:
        self.advance(bytes_amount)

    def advance(self, bytes_amount: int) -> int:
        """
        Record `bytes_amount` more bytes sent.

        Args:
            bytes_amount: Bytes transferred since the last call

        Returns:
            int: Current percentage
        """
        if bytes_amount > 0:
            self.transferred += bytes_amount
        if self.total <= 0:
            return self.percent

        percent = min(100, round(self.transferred * 100 / self.total))
        if percent > self.percent:
            self.percent = percent
            self._notify()
        return self.percent

    def complete(self) -> None:
        """Force 100% once the transfer has finished."""
        if self.percent < 100:
            self.percent = 100
            self._notify()

    def _notify(self) -> None:
        if self._callback is None:
            return
        try:
            self._callback(self.percent)
        except Exception:
            logger.exception("Progress callback failed")
