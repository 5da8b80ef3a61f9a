"""
Readiness Waiter - Best-effort wait for a page to stop loading.

Handles:
- Waiting for the document to finish parsing
- Waiting for network quiescence
- Waiting for common loading indicators to disappear

Every phase is bounded and fail-open: a timeout or error in one phase
just moves on to the next. Nothing here raises.
"""

from typing import Any, Optional
import logging

from autolocate.config.settings import ReadinessSettings
from autolocate.utils.polling import Deadline, budget

logger = logging.getLogger(__name__)


# Common loading indicators
LOADER_SELECTORS = [
    '[role="progressbar"]',
    '.spinner',
    '.loading',
    '.loader',
    '[data-testid*="spinner" i]',
    '[aria-busy="true"]',
]

HAS_LOADER_JS = r'''
(selectors) => selectors.some(sel => document.querySelector(sel))
'''


class ReadinessWaiter:
    """
    Converge on a quiet page before resolving elements.

    Example:
        >>> waiter = ReadinessWaiter()
        >>> await waiter.ensure_ready(page)
        >>> await waiter.ensure_ready(page, budget_ms=2000)  # cap the whole wait
    """

    def __init__(self, settings: Optional[ReadinessSettings] = None):
        self._settings = settings or ReadinessSettings()

    async def ensure_ready(self, page: Any, budget_ms: Optional[float] = None) -> None:
        """
        Wait for DOM ready, network idle and loaders to clear.

        Args:
            page: Playwright page
            budget_ms: Optional cap on the total time spent here
        """
        deadline = Deadline(timeout_ms=budget_ms) if budget_ms is not None else None
        s = self._settings

        await self._wait_load_state(page, "domcontentloaded", budget(s.dom_timeout_ms, deadline))
        await self._wait_load_state(page, "networkidle", budget(s.network_idle_timeout_ms, deadline))
        await self._wait_for_loaders(page, budget(s.loader_timeout_ms, deadline))

    async def _wait_load_state(self, page: Any, state: str, timeout_ms: float) -> None:
        if timeout_ms <= 0:
            return
        try:
            await page.wait_for_load_state(state, timeout=timeout_ms)
        except Exception as e:
            logger.debug(f"Load state '{state}' not reached: {e}")

    async def _wait_for_loaders(self, page: Any, timeout_ms: float) -> None:
        loaders = Deadline(timeout_ms=timeout_ms)
        while not loaders.expired:
            try:
                busy = await page.evaluate(HAS_LOADER_JS, LOADER_SELECTORS)
            except Exception as e:
                logger.debug(f"Loader check failed, treating page as ready: {e}")
                return
            if not busy:
                return
            await loaders.sleep(self._settings.loader_poll_ms)
        logger.debug(f"Loading indicators still present after {timeout_ms:.0f}ms")
