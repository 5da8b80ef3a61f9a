"""
Locator Resolver - Find buttons, links and text by a human-readable hint.

Strategies (tried in order, per frame, first match wins):
1. Role button by accessible name
2. Role link by accessible name
3. Role textbox by accessible name
4. Associated label
5. Placeholder
6. Visible text
7. data-testid (exact)
8. aria-label contains (literal hints only)
9. title contains (literal hints only)
10. button:has-text (literal hints only)
11. a:has-text (literal hints only)

The page is searched first, then each child frame in document order.
"""

from typing import Any, List, Optional, Sequence
import logging

from autolocate.engine.frames import all_contexts
from autolocate.engine.roles import Hint, describe_hint
from autolocate.engine.strategies import (
    Candidate,
    Strategy,
    first_found,
    literal_css_strategy,
    role_strategy,
)

logger = logging.getLogger(__name__)


RESOLVE_STRATEGIES: List[Strategy] = [
    role_strategy("button"),
    role_strategy("link"),
    role_strategy("textbox"),
    Strategy("label", lambda ctx, hint: ctx.get_by_label(hint)),
    Strategy("placeholder", lambda ctx, hint: ctx.get_by_placeholder(hint)),
    Strategy("text", lambda ctx, hint: ctx.get_by_text(hint)),
    Strategy("test-id", lambda ctx, hint: ctx.get_by_test_id(hint)),
    literal_css_strategy("aria-label", "[aria-label*={q}]"),
    literal_css_strategy("title", "[title*={q}]"),
    literal_css_strategy("button-has-text", "button:has-text({q})"),
    literal_css_strategy("link-has-text", "a:has-text({q})"),
]


class LocatorResolver:
    """
    Multi-strategy, cross-frame element resolution.

    Usage:
        resolver = LocatorResolver()
        candidate = await resolver.resolve(page, "Login")
        if candidate:
            await candidate.locator.click()
    """

    def __init__(self, strategies: Optional[Sequence[Strategy]] = None):
        self._strategies = list(strategies or RESOLVE_STRATEGIES)

    @property
    def strategies(self) -> List[Strategy]:
        return list(self._strategies)

    async def resolve(
        self,
        page: Any,
        hint: Hint,
        scroll: bool = True,
    ) -> Optional[Candidate]:
        """
        Resolve a hint to the first matching element.

        Args:
            page: Playwright page
            hint: Text or compiled pattern
            scroll: Scroll the match into view (failures are ignored)

        Returns:
            Candidate, or None when nothing matched
        """
        key = describe_hint(hint)
        result = await first_found(all_contexts(page), self._strategies, hint)
        if not result:
            logger.debug(f"No locator for {key}: {result.last_reason}")
            return None

        candidate = result.candidate
        if scroll:
            try:
                await candidate.locator.scroll_into_view_if_needed()
            except Exception as e:
                logger.debug(f"Scroll into view failed for {key}: {e}")

        return candidate
