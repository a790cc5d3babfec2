"""Cooperative cancellation shared by submission, monitoring and downloads."""

from __future__ import annotations

import asyncio


class CancellationToken:
    """One-shot cancellation signal observed by long-running steps.

    Must be created and used from within a single event loop.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation; repeated calls are no-ops."""

        self._event.set()

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""

        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """Sleep for ``seconds`` or until cancelled.

        Returns ``True`` when woken by cancellation.
        """

        if self.is_cancellation_requested:
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except TimeoutError:
            return False
        return True
