"""
Locator Suggestions - Rank candidate locators for a hint without touching the page.

For every page and frame a fixed set of queries is counted. Queries that
match nothing, or more than three elements, are excluded outright; the
rest get a 0-100 confidence and are returned most confident first.

The dummy-locator helpers scan test source for scaffold names such as
``placeholder_submitButton`` and recommend live locators to replace them.

Example:
    >>> suggester = LocatorSuggester()
    >>> for s in await suggester.suggest(page, "Submit"):
    ...     print(s.confidence, s.code)
    90 page.get_by_role("button", name="Submit")
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
import json
import logging
import re

from autolocate.engine.frames import all_contexts, context_url
from autolocate.engine.strategies import css_string

logger = logging.getLogger(__name__)


# Locator API kinds, as they appear in generated code
API_ROLE = "get_by_role"
API_LABEL = "get_by_label"
API_TEXT = "get_by_text"
API_LOCATOR = "locator"

MIN_MATCHES = 1
MAX_MATCHES = 3
DUMMY_SUGGESTION_LIMIT = 6


@dataclass(frozen=True)
class SuggestionWeights:
    """Additive confidence weights. Empirical; tune against the regression tests."""
    api_base: Tuple[Tuple[str, int], ...] = (
        (API_ROLE, 35),
        (API_LABEL, 30),
        (API_TEXT, 20),
        (API_LOCATOR, 10),
    )
    unique: int = 20
    not_unique: int = -10
    visible: int = 15
    not_visible: int = -15
    aria_reason: int = 10
    test_id_reason: int = 10

    def base(self, api: str) -> int:
        return dict(self.api_base).get(api, 0)


DEFAULT_SUGGESTION_WEIGHTS = SuggestionWeights()

_ARIA_REASON = re.compile(r"aria|role", re.I)
_TEST_ID_REASON = re.compile(r"data-testid", re.I)


@dataclass(frozen=True)
class LocatorSuggestion:
    """A ranked, ready-to-paste locator."""
    selector: str
    api: str
    confidence: int
    unique: bool
    visible: bool
    reasons: Tuple[str, ...] = field(default_factory=tuple)
    frame_url: str = ""

    @property
    def code(self) -> str:
        """Snippet usable in test code, e.g. ``page.get_by_label("Email")``."""
        if self.api == API_LOCATOR:
            return f"page.locator({json.dumps(self.selector)})"
        return f"page.{self.selector}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selector": self.selector,
            "api": self.api,
            "confidence": self.confidence,
            "unique": self.unique,
            "visible": self.visible,
            "reasons": list(self.reasons),
            "frame_url": self.frame_url,
        }


def confidence_for(
    api: str,
    unique: bool,
    visible: bool,
    reasons: Tuple[str, ...],
    weights: SuggestionWeights = DEFAULT_SUGGESTION_WEIGHTS,
) -> int:
    """Confidence score clamped to [0, 100]."""
    score = weights.base(api)
    score += weights.unique if unique else weights.not_unique
    score += weights.visible if visible else weights.not_visible
    if any(_ARIA_REASON.search(r) for r in reasons):
        score += weights.aria_reason
    if any(_TEST_ID_REASON.search(r) for r in reasons):
        score += weights.test_id_reason
    return max(0, min(100, score))


@dataclass(frozen=True)
class SuggestionQuery:
    """One candidate query: how to run it and how to write it down."""
    api: str
    reason: str
    build: Callable[[Any, "re.Pattern[str]", str], Any]
    render: Callable[[str], str]


def _role_query(role: str) -> SuggestionQuery:
    return SuggestionQuery(
        api=API_ROLE,
        reason=f"role {role} name match",
        build=lambda ctx, pattern, hint: ctx.get_by_role(role, name=pattern),
        render=lambda hint: f"get_by_role({json.dumps(role)}, name={json.dumps(hint)})",
    )


def _css_query(reason: str, template: str) -> SuggestionQuery:
    return SuggestionQuery(
        api=API_LOCATOR,
        reason=reason,
        build=lambda ctx, pattern, hint: ctx.locator(template.format(q=css_string(hint))),
        render=lambda hint: template.format(q=css_string(hint)),
    )


SUGGESTION_QUERIES: List[SuggestionQuery] = [
    _role_query("button"),
    _role_query("link"),
    SuggestionQuery(
        api=API_LABEL,
        reason="associated label match",
        build=lambda ctx, pattern, hint: ctx.get_by_label(pattern),
        render=lambda hint: f"get_by_label({json.dumps(hint)})",
    ),
    SuggestionQuery(
        api=API_TEXT,
        reason="text node match",
        build=lambda ctx, pattern, hint: ctx.get_by_text(pattern),
        render=lambda hint: f"get_by_text({json.dumps(hint)})",
    ),
    _css_query("data-testid contains", "[data-testid*={q} i]"),
    _css_query("button has-text", "button:has-text({q})"),
    _css_query("aria-label contains", "[aria-label*={q} i]"),
    _css_query("link has-text", "a:has-text({q})"),
]


class LocatorSuggester:
    """
    Read-only ranking of locator candidates across the page and its frames.

    Only ``count()`` and ``is_visible()`` are called on the page, so the
    same unchanged document always yields the same ranking.
    """

    def __init__(
        self,
        queries: Optional[List[SuggestionQuery]] = None,
        weights: SuggestionWeights = DEFAULT_SUGGESTION_WEIGHTS,
        max_matches: int = MAX_MATCHES,
    ):
        self._queries = list(queries or SUGGESTION_QUERIES)
        self._weights = weights
        self._max_matches = max_matches

    async def suggest(self, page: Any, hint: str) -> List[LocatorSuggestion]:
        """
        Rank locators for a hint.

        Args:
            page: Playwright page
            hint: Plain text; matched case-insensitively

        Returns:
            Suggestions sorted by confidence, highest first
        """
        pattern = re.compile(re.escape(hint), re.I)
        suggestions: List[LocatorSuggestion] = []

        for ctx in all_contexts(page):
            frame_url = context_url(ctx)
            for query in self._queries:
                suggestion = await self._evaluate(ctx, query, pattern, hint, frame_url)
                if suggestion is not None:
                    suggestions.append(suggestion)

        seen = set()
        unique: List[LocatorSuggestion] = []
        for s in suggestions:
            key = (s.selector, s.frame_url)
            if key in seen:
                continue
            seen.add(key)
            unique.append(s)

        # sorted() is stable, so equal scores keep query order
        ranked = sorted(unique, key=lambda s: s.confidence, reverse=True)
        logger.debug(f"{len(ranked)} suggestion(s) for {hint!r}")
        return ranked

    async def _evaluate(
        self,
        ctx: Any,
        query: SuggestionQuery,
        pattern: "re.Pattern[str]",
        hint: str,
        frame_url: str,
    ) -> Optional[LocatorSuggestion]:
        try:
            locator = query.build(ctx, pattern, hint)
            count = await locator.count()
        except Exception as e:
            logger.debug(f"Suggestion query '{query.reason}' failed: {e}")
            return None

        if count < MIN_MATCHES or count > self._max_matches:
            return None

        try:
            visible = bool(await locator.first.is_visible())
        except Exception:
            visible = False

        reasons = (query.reason,)
        unique = count == 1
        return LocatorSuggestion(
            selector=query.render(hint),
            api=query.api,
            confidence=confidence_for(query.api, unique, visible, reasons, self._weights),
            unique=unique,
            visible=visible,
            reasons=reasons,
            frame_url=frame_url,
        )


async def suggest_locators(page: Any, hint: str) -> List[LocatorSuggestion]:
    """Rank locators for a hint with the default queries and weights."""
    return await LocatorSuggester().suggest(page, hint)


# =============================================================================
# Dummy locators
# =============================================================================

DUMMY_PATTERNS: List["re.Pattern[str]"] = [
    re.compile(r"placeholder_\w+"),
    re.compile(r"dummy_\w+"),
    re.compile(r"test_\w+"),
    re.compile(r'\[data-testid="\w+"\]'),
    re.compile(r'(?:getByText|get_by_text)\("[^"]*placeholder[^"]*"\)'),
    re.compile(r'getByRole\("button", \{ name: "[^"]*placeholder[^"]*" \}\)'),
    re.compile(r'get_by_role\("button", name="[^"]*placeholder[^"]*"\)'),
]

MARKER_WORDS = {"placeholder", "dummy", "test"}
WIDGET_WORDS = {"button", "btn", "link", "field", "input"}

_QUOTED = re.compile(r'"([^"]*)"')
_CAMEL = re.compile(r"([a-z0-9])([A-Z])")
_NON_WORD = re.compile(r"[^A-Za-z0-9]+")


def find_dummy_locators(text: str) -> List[str]:
    """
    Find scaffold locator names in source text.

    Returns:
        Distinct matches in pattern order, then order of appearance
    """
    found: List[str] = []
    for pattern in DUMMY_PATTERNS:
        for match in pattern.findall(text):
            if match not in found:
                found.append(match)
    return found


def dummy_hint(match: str) -> str:
    """
    Derive a human hint from a scaffold name.

    Example:
        >>> dummy_hint("placeholder_submitButton")
        'submit'
        >>> dummy_hint('[data-testid="dummy_login_link"]')
        'login'
    """
    quoted = _QUOTED.findall(match)
    source = quoted[-1] if quoted else match
    source = _CAMEL.sub(r"\1 \2", source)
    words = [w.lower() for w in _NON_WORD.split(source) if w]
    words = [w for w in words if w not in MARKER_WORDS]
    while len(words) > 1 and words[-1] in WIDGET_WORDS:
        words.pop()
    return " ".join(words)


async def suggest_dummy_replacements(
    page: Any,
    text: str,
    suggester: Optional[LocatorSuggester] = None,
) -> Dict[str, List[LocatorSuggestion]]:
    """
    Suggest live locators for every scaffold name in the text.

    Returns:
        Mapping of scaffold match to its top suggestions (at most six);
        matches without suggestions are left out
    """
    suggester = suggester or LocatorSuggester()
    out: Dict[str, List[LocatorSuggestion]] = {}
    for match in find_dummy_locators(text):
        hint = dummy_hint(match)
        if not hint:
            continue
        suggestions = await suggester.suggest(page, hint)
        if suggestions:
            out[match] = suggestions[:DUMMY_SUGGESTION_LIMIT]
    return out


async def find_real_locator(
    page: Any,
    dummy: str,
    suggester: Optional[LocatorSuggester] = None,
) -> Optional[str]:
    """Best live locator snippet for one scaffold name, or None."""
    hint = dummy_hint(dummy)
    if not hint:
        return None
    suggestions = await (suggester or LocatorSuggester()).suggest(page, hint)
    if not suggestions:
        return None
    return suggestions[0].code


async def replace_dummy_locators(
    page: Any,
    text: str,
    suggester: Optional[LocatorSuggester] = None,
) -> str:
    """
    Rewrite scaffold names in the text with live locator snippets.

    The page is only queried; the returned string is the only output.
    """
    suggester = suggester or LocatorSuggester()
    updated = text
    for match in find_dummy_locators(text):
        real = await find_real_locator(page, match, suggester)
        if real:
            updated = updated.replace(match, real)
            logger.info(f"Replaced dummy locator: {match} -> {real}")
    return updated
