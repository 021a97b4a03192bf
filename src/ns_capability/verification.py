"""Identity verification (KYC) capability.

The lifecycle rules depend only on the boolean gate. SimulatedKycGate always
succeeds after a fixed delay; a real provider integration replaces it
without touching the rules.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class VerificationCapability(Protocol):
    async def is_verified(self, actor: str) -> bool: ...

    async def verify(self, actor: str) -> bool: ...


class SimulatedKycGate:
    """Per-actor verification flag that flips to True after ``delay`` seconds."""

    def __init__(
        self,
        delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._delay = delay
        self._sleep = sleep
        self._verified: set[str] = set()

    async def is_verified(self, actor: str) -> bool:
        return actor in self._verified

    async def verify(self, actor: str) -> bool:
        if actor in self._verified:
            return True
        logger.info("Verifying identity for %s", actor)
        await self._sleep(self._delay)
        self._verified.add(actor)
        logger.info("Identity verified for %s", actor)
        return True
