"""
Step Harness - Per-test state machine for debug steps and failures.

States:

    RUNNING --debug_step--> RUNNING
    RUNNING --pause-------> PAUSED --resume--> RUNNING
    RUNNING --finish(ok)--> PASSED
    RUNNING --finish(err)-> FAILED [--interactive--> PAUSED_FOR_INSPECTION]

``PAUSED_FOR_INSPECTION`` is only reachable when ``interactive_on_failure``
is enabled (or ``PWDEBUG`` is set). In that state the harness suspends
until ``release()`` is called, leaving the browser open. Without it the
failure is captured, the browser is closed and pytest reports the failure.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional
import asyncio
import logging

from autolocate.config.settings import HarnessSettings
from autolocate.exceptions import HarnessStateError
from autolocate.harness.diagnostics import FailureDiagnostics, FailureReport

logger = logging.getLogger(__name__)


class HarnessState(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    PASSED = "passed"
    FAILED = "failed"
    PAUSED_FOR_INSPECTION = "paused_for_inspection"


ALLOWED_TRANSITIONS = {
    HarnessState.RUNNING: {HarnessState.PAUSED, HarnessState.PASSED, HarnessState.FAILED},
    HarnessState.PAUSED: {HarnessState.RUNNING},
    HarnessState.FAILED: {HarnessState.PAUSED_FOR_INSPECTION},
    HarnessState.PASSED: set(),
    HarnessState.PAUSED_FOR_INSPECTION: set(),
}

Closer = Callable[[], Awaitable[None]]


class StepHarness:
    """
    Drives one test through debug steps to a terminal state.

    Args:
        settings: Harness settings (step delay, confirm, interactive failure)
        diagnostics: Failure capture; defaults to the artifacts directory
        close: Coroutine function that releases the browser resources

    Example:
        >>> harness = StepHarness(settings.harness, close=session.close)
        >>> await harness.debug_step(page, "Open login page")
        >>> await harness.finish(page, failed=False)
    """

    def __init__(
        self,
        settings: Optional[HarnessSettings] = None,
        diagnostics: Optional[FailureDiagnostics] = None,
        close: Optional[Closer] = None,
    ):
        self.settings = settings or HarnessSettings()
        self.diagnostics = diagnostics or FailureDiagnostics(self.settings.artifacts_dir)
        self._close = close
        self._state = HarnessState.RUNNING
        self._history: List[HarnessState] = [HarnessState.RUNNING]
        self._released = asyncio.Event()
        self.steps: List[str] = []
        self.report: Optional[FailureReport] = None

    @property
    def state(self) -> HarnessState:
        return self._state

    @property
    def history(self) -> List[HarnessState]:
        return list(self._history)

    def _transition(self, new_state: HarnessState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self._state]:
            raise HarnessStateError(self._state.value, new_state.value)
        logger.debug(f"Harness {self._state.value} -> {new_state.value}")
        self._state = new_state
        self._history.append(new_state)

    async def debug_step(self, page: Any, label: str) -> None:
        """
        Mark a test step: log, wait the step delay, optionally pause, log location.

        Args:
            page: Playwright page
            label: Human-readable step name
        """
        if self._state is not HarnessState.RUNNING:
            raise HarnessStateError(self._state.value, "step")

        self.steps.append(label)
        logger.info(f"STEP {len(self.steps)}: {label}")

        delay = self.settings.step_delay_ms
        if delay > 0:
            await page.wait_for_timeout(delay)

        if self.settings.step_confirm:
            self._transition(HarnessState.PAUSED)
            logger.info(f"PAUSED: {label} - press 'Resume' in the inspector to continue")
            try:
                await page.pause()
            finally:
                self._transition(HarnessState.RUNNING)

        try:
            logger.info(f"Current URL: {page.url} | Page title: {await page.title()}")
        except Exception as e:
            logger.debug(f"Could not read page location: {e}")

    async def finish(
        self,
        page: Any,
        failed: bool,
        error: Optional[BaseException] = None,
    ) -> Optional[FailureReport]:
        """
        Move to a terminal state.

        On pass the browser is closed. On failure diagnostics are captured;
        then either the harness suspends for inspection (interactive) or the
        browser is closed.

        Returns:
            The failure report, or None for a passing test
        """
        if not failed:
            self._transition(HarnessState.PASSED)
            await self._close_resources()
            return None

        self._transition(HarnessState.FAILED)
        self.report = await self.diagnostics.capture(page, error)

        if self.settings.interactive_on_failure:
            self._transition(HarnessState.PAUSED_FOR_INSPECTION)
            logger.warning(
                "Browser kept open for inspection; use the console helpers, "
                "then stop the run (Ctrl+C) when done"
            )
            await self.hold_for_inspection()

        await self._close_resources()
        return self.report

    async def hold_for_inspection(self) -> None:
        """Suspend until ``release()`` is called."""
        await self._released.wait()

    def release(self) -> None:
        """Resume a harness held for inspection."""
        self._released.set()

    async def _close_resources(self) -> None:
        if self._close is None:
            return
        try:
            await self._close()
        except Exception as e:
            logger.debug(f"Closing browser resources failed: {e}")
