"""Paced, in-order delivery of reply chunks."""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Protocol

logger = logging.getLogger("wagemini.delivery")

# Pause between chunks, in seconds: roughly how long a person takes to
# type the next short message. Also keeps us under provider rate limits.
MIN_CHUNK_DELAY = 0.55
MAX_CHUNK_DELAY = 1.5


class DeliveryCapability(Protocol):
    async def send(self, recipient: str, text: str) -> bool: ...


class DeliveryScheduler:
    """Send chunks one at a time with a randomized pause between them."""

    def __init__(
        self,
        delivery: DeliveryCapability,
        min_delay: float = MIN_CHUNK_DELAY,
        max_delay: float = MAX_CHUNK_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delivery = delivery
        self.min_delay = min_delay
        self.max_delay = max_delay
        self._sleep = sleep

    async def send_all(self, recipient: str, chunks: list[str]) -> int:
        """Deliver chunks in order, stopping at the first failure.

        Returns:
            Number of chunks delivered.
        """
        sent = 0
        for i, chunk in enumerate(chunks):
            try:
                ok = await self.delivery.send(recipient, chunk)
            except Exception as e:
                logger.error(f"Delivery to {recipient} raised {type(e).__name__}: {e}")
                ok = False

            if not ok:
                logger.error(
                    f"Failed to send message chunk {i + 1}/{len(chunks)} to {recipient}; "
                    f"dropping the remaining {len(chunks) - i - 1}"
                )
                break
            sent += 1

            if i < len(chunks) - 1:
                await self._sleep(random.uniform(self.min_delay, self.max_delay))

        return sent
