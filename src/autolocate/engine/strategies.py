"""
Locator strategies and the ordered-alternatives combinator.

A strategy turns (context, hint) into a Playwright locator. Trying a
strategy yields ``Found`` or ``NotFound``; it never raises. The fallback
order is therefore a plain list that can be inspected and tested.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union
import json
import logging

from autolocate.engine.frames import context_url
from autolocate.engine.roles import Hint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A live element reference inside one page or frame."""
    locator: Any
    strategy: str
    frame_url: str = ""


@dataclass(frozen=True)
class Found:
    """Successful strategy outcome."""
    candidate: Candidate

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    """Failed strategy outcome, with why each attempt missed."""
    reasons: Tuple[str, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return False

    @property
    def last_reason(self) -> str:
        return self.reasons[-1] if self.reasons else ""


Result = Union[Found, NotFound]


@dataclass(frozen=True)
class Strategy:
    """
    A named way of querying for a hint.

    ``build`` returns None when the strategy does not apply to the hint
    (e.g. CSS attribute queries for regex hints).
    """
    name: str
    build: Callable[[Any, Hint], Optional[Any]]


def css_string(text: str) -> str:
    """Quote text for use inside a CSS attribute or :has-text() selector."""
    return json.dumps(text)


def role_strategy(role: str) -> Strategy:
    return Strategy(f"role={role}", lambda ctx, hint: ctx.get_by_role(role, name=hint))


def literal_css_strategy(name: str, template: str) -> Strategy:
    """CSS strategy that only applies to literal hints; ``{q}`` is the quoted hint."""
    def build(ctx: Any, hint: Hint) -> Optional[Any]:
        if not isinstance(hint, str):
            return None
        return ctx.locator(template.format(q=css_string(hint)))
    return Strategy(name, build)


def css_strategy(name: str, selector: str) -> Strategy:
    """Fixed CSS selector, independent of the hint."""
    return Strategy(name, lambda ctx, hint: ctx.locator(selector))


async def try_strategy(ctx: Any, strategy: Strategy, hint: Hint) -> Result:
    """
    Run one strategy in one context.

    Returns:
        Found with the first match, or NotFound with a reason
    """
    try:
        locator = strategy.build(ctx, hint)
    except Exception as e:
        return NotFound((f"{strategy.name}: query failed ({e})",))
    if locator is None:
        return NotFound((f"{strategy.name}: not applicable",))

    try:
        first = locator.first
        count = await first.count()
    except Exception as e:
        return NotFound((f"{strategy.name}: query failed ({e})",))

    if count == 0:
        return NotFound((f"{strategy.name}: no match",))
    return Found(Candidate(locator=first, strategy=strategy.name, frame_url=context_url(ctx)))


async def first_found(
    contexts: Iterable[Any],
    strategies: Sequence[Strategy],
    hint: Hint,
) -> Result:
    """
    Ordered alternatives; the first Found wins.

    Returns:
        The first Found, or a NotFound collecting every miss
    """
    misses: List[str] = []
    for ctx in contexts:
        for strategy in strategies:
            result = await try_strategy(ctx, strategy, hint)
            if result:
                logger.debug(f"Matched with {strategy.name} in {result.candidate.frame_url or 'page'}")
                return result
            misses.extend(result.reasons)
    return NotFound(tuple(misses))
