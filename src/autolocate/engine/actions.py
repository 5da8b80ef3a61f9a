"""
Auto Actions - fill, click and wait-visible by human-readable hint.

This is the only part of the engine that changes page state. Each action:
1. Waits (best-effort) for the page to settle
2. Resolves the hint with the field scorer or the locator resolver
3. Falls back through an explicit list of alternatives
4. Raises one descriptive error only when everything has been tried

Example:
    >>> actions = AutoActions()
    >>> await actions.auto_fill(page, re.compile("username", re.I), "test18")
    >>> await actions.auto_fill(page, re.compile("password", re.I), "test123")
    >>> await actions.auto_click(page, "Login")
    >>> await actions.auto_expect_visible(page, "Welcome", timeout_ms=10000)
"""

from typing import Any, Dict, List, Optional
import logging
import re

from autolocate.config.settings import Settings
from autolocate.engine.field_scorer import FieldScorer
from autolocate.engine.frames import all_contexts, context_url
from autolocate.engine.readiness import ReadinessWaiter
from autolocate.engine.resolver import LocatorResolver
from autolocate.engine.roles import (
    Hint,
    SemanticRole,
    classify_hint,
    describe_hint,
    hint_text,
    is_password_like,
    is_username_like,
)
from autolocate.engine.run_context import RunContext
from autolocate.engine.strategies import (
    Candidate,
    Strategy,
    css_strategy,
    role_strategy,
    try_strategy,
)
from autolocate.exceptions import (
    ActionExecutionError,
    ElementNotFoundError,
    VisibilityTimeoutError,
)
from autolocate.utils.polling import Deadline, now_ms

logger = logging.getLogger(__name__)

CODE_PLACEHOLDER = re.compile(r"code|verification|otp", re.I)


def _label() -> Strategy:
    return Strategy("label", lambda ctx, hint: ctx.get_by_label(hint))


def _placeholder() -> Strategy:
    return Strategy("placeholder", lambda ctx, hint: ctx.get_by_placeholder(hint))


def _name_attribute() -> Strategy:
    def build(ctx: Any, hint: Hint) -> Optional[Any]:
        if not isinstance(hint, str):
            return None
        quoted = hint.replace("\\", "\\\\").replace('"', '\\"')
        return ctx.locator(f'input[name="{quoted}"], textarea[name="{quoted}"]')
    return Strategy("name-attribute", build)


# Role-specific alternatives, tried after the scorer misses
ROLE_FILL_STRATEGIES: Dict[SemanticRole, List[Strategy]] = {
    SemanticRole.PASSWORD: [
        css_strategy("password-type", 'input[type="password"]'),
        _label(),
        _placeholder(),
        css_strategy("password-name", 'input[name*="password"], input[name*="pass"], input[name*="pwd"]'),
    ],
    SemanticRole.USERNAME: [
        _label(),
        _placeholder(),
        role_strategy("textbox"),
        css_strategy("text-type", 'input[type="text"]:not([name*="password"]):not([type="password"])'),
    ],
    SemanticRole.CODE: [
        css_strategy("one-time-code", 'input[autocomplete*="one-time-code" i]'),
        Strategy(
            "code-placeholder",
            lambda ctx, hint: ctx.get_by_placeholder(CODE_PLACEHOLDER),
        ),
        css_strategy("code-name", 'input[name*="code" i], input[name*="otp" i], input[name*="verification" i]'),
    ],
    SemanticRole.TEXT: [
        _label(),
        _placeholder(),
        role_strategy("textbox"),
    ],
}
ROLE_FILL_STRATEGIES[SemanticRole.EMAIL] = ROLE_FILL_STRATEGIES[SemanticRole.USERNAME]

# Generic alternatives for any role
GENERIC_FILL_STRATEGIES: List[Strategy] = [
    _label(),
    _placeholder(),
    role_strategy("textbox"),
    _name_attribute(),
]

FOLLOWING_INPUT = "xpath=following::input[1] | following::textarea[1]"


def fill_strategies(role: SemanticRole) -> List[Strategy]:
    """Role-specific then generic alternatives, without repeating a strategy."""
    seen = set()
    ordered: List[Strategy] = []
    for strategy in ROLE_FILL_STRATEGIES[role] + GENERIC_FILL_STRATEGIES:
        if strategy.name in seen:
            continue
        seen.add(strategy.name)
        ordered.append(strategy)
    return ordered


class AutoActions:
    """
    Action façade over the readiness waiter, field scorer and resolver.

    Args:
        settings: Settings (resolver, readiness sections are used)
        run_context: Run-scoped memory; a fresh one is created when omitted
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        run_context: Optional[RunContext] = None,
        resolver: Optional[LocatorResolver] = None,
        scorer: Optional[FieldScorer] = None,
        waiter: Optional[ReadinessWaiter] = None,
    ):
        self._settings = settings or Settings()
        opts = self._settings.resolver
        self.run_context = run_context or RunContext(max_learned=opts.max_learned)
        self.resolver = resolver or LocatorResolver()
        self.scorer = scorer or FieldScorer(threshold=opts.field_score_threshold)
        self.waiter = waiter or ReadinessWaiter(self._settings.readiness)

    # ------------------------------------------------------------------
    # fill
    # ------------------------------------------------------------------

    async def auto_fill(self, page: Any, field_hint: Hint, value: str) -> Candidate:
        """
        Fill the input that best matches a hint.

        Order: semantic scorer, role-specific and generic strategies,
        nearest input after matching text, then position (first textbox for
        username hints, second for password hints).

        Returns:
            The candidate that was filled

        Raises:
            ElementNotFoundError: When no strategy found a fillable input
        """
        key = describe_hint(field_hint)
        role = classify_hint(field_hint)
        started = now_ms()
        shown = "***" if role is SemanticRole.PASSWORD else repr(value)
        logger.info(f"Auto-filling {key} ({role.value}) with {shown}")

        await self.waiter.ensure_ready(page)

        candidate = await self._fill_scored(page, role, field_hint, value)
        if candidate is None:
            candidate = await self._fill_with_strategies(page, fill_strategies(role), field_hint, value)
        if candidate is None:
            candidate = await self._fill_near_text(page, field_hint, value)
        if candidate is None:
            candidate = await self._fill_by_position(page, field_hint, value)

        if candidate is None:
            self.run_context.record_action(
                "fill", key, success=False, duration_ms=now_ms() - started,
                error="no input found",
            )
            raise ElementNotFoundError(f"Auto-fill could not find an input for {key}", hint=key)

        logger.info(f"Filled {key} using {candidate.strategy}")
        self.run_context.remember_strategy(key, candidate.strategy, action="fill")
        self.run_context.record_action(
            "fill", key, strategy=candidate.strategy, duration_ms=now_ms() - started,
        )
        return candidate

    async def _fill_scored(
        self, page: Any, role: SemanticRole, field_hint: Hint, value: str
    ) -> Optional[Candidate]:
        try:
            candidate = await self.scorer.find_field(page, role, hint_text(field_hint))
        except Exception as e:
            logger.debug(f"Semantic field search failed: {e}")
            return None
        if candidate is None:
            return None
        try:
            await self._type_into(candidate.locator, value)
        except Exception as e:
            logger.debug(f"Typing into scored field failed: {e}")
            return None
        return candidate

    async def _type_into(self, locator: Any, value: str) -> None:
        """Focus, clear and type character by character, then fire input/change."""
        opts = self._settings.resolver
        try:
            await locator.scroll_into_view_if_needed()
        except Exception as e:
            logger.debug(f"Scroll into view failed: {e}")
        await locator.click(timeout=opts.focus_timeout_ms)
        await locator.fill("")
        await locator.press_sequentially(value, delay=opts.type_delay_ms)
        for event in ("input", "change"):
            try:
                await locator.dispatch_event(event)
            except Exception as e:
                logger.debug(f"Dispatching {event} failed: {e}")

    async def _fill_with_strategies(
        self, page: Any, strategies: List[Strategy], field_hint: Hint, value: str
    ) -> Optional[Candidate]:
        for ctx in all_contexts(page):
            for strategy in strategies:
                result = await try_strategy(ctx, strategy, field_hint)
                if not result:
                    continue
                try:
                    await result.candidate.locator.fill(value)
                    return result.candidate
                except Exception as e:
                    logger.debug(f"Fill via {strategy.name} failed: {e}")
        return None

    async def _fill_near_text(self, page: Any, field_hint: Hint, value: str) -> Optional[Candidate]:
        for ctx in all_contexts(page):
            try:
                text = ctx.get_by_text(field_hint, exact=False).first
                neighbor = text.locator(FOLLOWING_INPUT).first
                if await neighbor.count():
                    await neighbor.fill(value)
                    return Candidate(locator=neighbor, strategy="near-text", frame_url=context_url(ctx))
            except Exception as e:
                logger.debug(f"Neighbor input strategy failed: {e}")
        return None

    async def _fill_by_position(self, page: Any, field_hint: Hint, value: str) -> Optional[Candidate]:
        if is_password_like(field_hint):
            position, name = 1, "position:second-textbox"
        elif is_username_like(field_hint):
            position, name = 0, "position:first-textbox"
        else:
            return None
        try:
            box = page.get_by_role("textbox").nth(position)
            if await box.count():
                await box.fill(value)
                return Candidate(locator=box, strategy=name, frame_url=context_url(page))
        except Exception as e:
            logger.debug(f"Positional fill failed: {e}")
        return None

    # ------------------------------------------------------------------
    # click
    # ------------------------------------------------------------------

    async def auto_click(self, page: Any, hint: Hint) -> Candidate:
        """
        Click the element that best matches a hint.

        A failed click is retried once as a dispatched ``click`` event.

        Raises:
            ElementNotFoundError: When the resolver finds nothing
            ActionExecutionError: When both click mechanisms fail
        """
        key = describe_hint(hint)
        started = now_ms()
        logger.info(f"Auto-clicking {key}")

        await self.waiter.ensure_ready(page)
        candidate = await self.resolver.resolve(page, hint)
        if candidate is None:
            self.run_context.record_action(
                "click", key, success=False, duration_ms=now_ms() - started,
                error="no element found",
            )
            raise ElementNotFoundError(
                f"Auto-click could not locate a clickable element for {key}", hint=key
            )

        try:
            await candidate.locator.click(timeout=self._settings.resolver.click_timeout_ms)
        except Exception as e:
            logger.info(f"Standard click on {key} failed, dispatching click event: {e}")
            try:
                await candidate.locator.dispatch_event("click")
            except Exception as e2:
                self.run_context.record_action(
                    "click", key, success=False, strategy=candidate.strategy,
                    duration_ms=now_ms() - started, error=str(e2),
                )
                raise ActionExecutionError(
                    f"Could not click {key}: click failed ({e}) and dispatched click failed ({e2})",
                    action_type="click",
                    hint=key,
                ) from e2

        logger.info(f"Clicked {key} using {candidate.strategy}")
        self.run_context.remember_strategy(key, candidate.strategy, action="click")
        self.run_context.record_action(
            "click", key, strategy=candidate.strategy, duration_ms=now_ms() - started,
        )
        return candidate

    # ------------------------------------------------------------------
    # visibility
    # ------------------------------------------------------------------

    async def auto_expect_visible(
        self,
        page: Any,
        hint: Hint,
        timeout_ms: Optional[int] = None,
    ) -> Any:
        """
        Poll until the hint resolves to a visible element.

        Args:
            page: Playwright page
            hint: Text or compiled pattern
            timeout_ms: Total time to wait (default from settings, 20000)

        Returns:
            The visible Playwright locator

        Raises:
            VisibilityTimeoutError: When the deadline passes first
        """
        opts = self._settings.resolver
        timeout = opts.visible_timeout_ms if timeout_ms is None else timeout_ms
        key = describe_hint(hint)
        deadline = Deadline(timeout_ms=timeout)
        last_error: Optional[BaseException] = None

        while not deadline.expired:
            await self.waiter.ensure_ready(page, budget_ms=deadline.remaining_ms)
            candidate = await self.resolver.resolve(page, hint)
            if candidate is not None and not deadline.expired:
                try:
                    await candidate.locator.wait_for(
                        state="visible",
                        timeout=max(1, deadline.cap(opts.visible_check_ms)),
                    )
                    self.run_context.remember_strategy(key, candidate.strategy, action="expect_visible")
                    self.run_context.record_action(
                        "expect_visible", key, strategy=candidate.strategy,
                        duration_ms=deadline.elapsed_ms,
                    )
                    return candidate.locator
                except Exception as e:
                    last_error = e
            await deadline.sleep(opts.visible_poll_ms)

        elapsed = int(deadline.elapsed_ms)
        self.run_context.record_action(
            "expect_visible", key, success=False, duration_ms=elapsed,
            error=str(last_error) if last_error else "not found",
        )
        raise VisibilityTimeoutError(key, timeout, elapsed, last_error)
