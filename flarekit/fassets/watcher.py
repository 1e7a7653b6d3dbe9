"""
Bounded wait for an FAssets mint to land.

After the XRP payment, minting completes only when an agent or executor
submits the payment proof. That happens outside this process, so the
only signal is the minter's FAsset balance going up.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 30
POLL_ATTEMPTS = 40
PROGRESS_EVERY = 4


@dataclass
class MintOutcome:
    """Result of waiting for a mint; minted False means still pending."""

    minted: bool
    delta: int
    attempts: int
    balance: int

    @property
    def pending(self) -> bool:
        return not self.minted


class MintWatcher:
    """Polls a balance reader until it rises above a starting balance."""

    def __init__(
        self,
        interval: float = POLL_INTERVAL_SECONDS,
        attempts: int = POLL_ATTEMPTS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.interval = interval
        self.attempts = attempts
        self._sleep = sleep

    @property
    def max_wait_seconds(self) -> float:
        return self.interval * self.attempts

    async def wait_for_mint(
        self,
        read_balance: Callable[[], Awaitable[int]],
        start_balance: int,
    ) -> MintOutcome:
        """
        Sleep, read, repeat; stop on the first increase.

        Errors from read_balance propagate. A timeout is not an error: the
        outcome comes back with minted=False.
        """
        balance = start_balance
        for attempt in range(1, self.attempts + 1):
            await self._sleep(self.interval)
            balance = await read_balance()
            delta = balance - start_balance
            if delta > 0:
                logger.info(f"Mint observed after {attempt} poll(s): +{delta}")
                return MintOutcome(minted=True, delta=delta, attempts=attempt, balance=balance)

            if attempt % PROGRESS_EVERY == 0:
                logger.info(f"Still waiting... ({int(attempt * self.interval)}s elapsed)")

        logger.warning(f"No mint after {int(self.max_wait_seconds)}s; reservation still pending")
        return MintOutcome(minted=False, delta=0, attempts=self.attempts, balance=balance)
