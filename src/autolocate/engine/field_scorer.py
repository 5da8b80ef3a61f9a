"""
Field Scorer - Pick the input that best fits a semantic role.

The page is asked for a flat snapshot of every ``input``/``textarea``
(type, name, id, class, placeholder, aria-label, autocomplete, label
text, visibility). Scoring happens in Python so the rules can be tested
without a browser.

Label text is resolved in this order:
1. ``label[for=<id>]``
2. Wrapping ``<label>``
3. Preceding sibling ``<label>``
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Sequence, Tuple
import logging
import re

from autolocate.engine.frames import all_contexts, context_url
from autolocate.engine.roles import SemanticRole
from autolocate.engine.strategies import Candidate

logger = logging.getLogger(__name__)

FIELD_SELECTOR = "input, textarea"

FIELD_SNAPSHOT_JS = r'''
() => {
    const elements = Array.from(document.querySelectorAll('input, textarea'));

    function isVisible(el) {
        const rect = el.getBoundingClientRect();
        const style = window.getComputedStyle(el);
        return rect.width > 0 && rect.height > 0
            && style.visibility !== 'hidden' && style.display !== 'none';
    }

    function labelText(el) {
        if (el.id) {
            const lbl = document.querySelector(`label[for="${CSS.escape(el.id)}"]`);
            if (lbl) return (lbl.textContent || '').trim();
        }
        const parentLabel = el.closest('label');
        if (parentLabel) return (parentLabel.textContent || '').trim();
        const prev = el.previousElementSibling;
        if (prev && prev.tagName.toLowerCase() === 'label') return (prev.textContent || '').trim();
        return '';
    }

    return elements.map((el, index) => ({
        index: index,
        tag: el.tagName.toLowerCase(),
        type: (el.type || '').toLowerCase(),
        name: el.name || '',
        id: el.id || '',
        className: typeof el.className === 'string' ? el.className : '',
        placeholder: el.placeholder || '',
        ariaLabel: el.getAttribute('aria-label') || '',
        autocomplete: el.getAttribute('autocomplete') || '',
        label: labelText(el),
        visible: isVisible(el),
    }));
}
'''


def _tokens(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.I) for p in patterns)


USERNAME_TOKENS = _tokens(r"user", r"username", r"login", r"email", r"online\s*id")
PASSWORD_TOKENS = _tokens(r"pass", r"pwd", r"password")
CODE_TOKENS = _tokens(r"code", r"otp", r"verification", r"token")


def _includes_any(text: str, tokens: Sequence[Pattern[str]]) -> bool:
    return any(t.search(text) for t in tokens)


@dataclass(frozen=True)
class FieldSnapshot:
    """Attributes of one input-like element, as seen by the page."""
    index: int
    tag: str = "input"
    type: str = "text"
    name: str = ""
    id: str = ""
    class_name: str = ""
    placeholder: str = ""
    aria_label: str = ""
    autocomplete: str = ""
    label: str = ""
    visible: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldSnapshot":
        return cls(
            index=int(data.get("index", 0)),
            tag=data.get("tag") or "input",
            type=data.get("type") or "",
            name=data.get("name") or "",
            id=data.get("id") or "",
            class_name=data.get("className") or "",
            placeholder=data.get("placeholder") or "",
            aria_label=data.get("ariaLabel") or "",
            autocomplete=data.get("autocomplete") or "",
            label=data.get("label") or "",
            visible=bool(data.get("visible", False)),
        )


@dataclass(frozen=True)
class ScoringWeights:
    """
    Additive scoring rules. Empirical; tune against the regression tests.
    """
    invisible: int = -200

    # password role
    password_type: int = 150
    not_password_type: int = -80
    password_tokens: int = 60
    password_autocomplete: int = 40
    username_tokens_on_password: int = -60

    # username / email role
    password_type_on_username: int = -150
    email_type: int = 40
    username_tokens: int = 70
    username_autocomplete: int = 50
    password_tokens_on_username: int = -60

    # one-time code role
    password_type_on_code: int = -40
    code_tokens: int = 80
    code_autocomplete: int = 60

    # generic text role
    text_type: int = 10
    text_types: Tuple[str, ...] = ("text", "search", "tel")

    # any role
    signal: int = 5


DEFAULT_WEIGHTS = ScoringWeights()


def score_field(
    snapshot: FieldSnapshot,
    role: SemanticRole,
    hint_text: str = "",
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> int:
    """
    Score one field for a role.

    Args:
        snapshot: Field attributes
        role: Semantic role being looked for
        hint_text: Free-text hint, counted as an extra token source
        weights: Scoring constants

    Returns:
        Integer score; higher is a better fit
    """
    w = weights
    score = 0
    if not snapshot.visible:
        score += w.invisible

    type_ = snapshot.type.lower()
    name = snapshot.name.lower()
    id_ = snapshot.id.lower()
    cls = snapshot.class_name.lower()
    placeholder = snapshot.placeholder.lower()
    aria = snapshot.aria_label.lower()
    autocomplete = snapshot.autocomplete.lower()
    label = snapshot.label.lower()
    hint = (hint_text or "").lower()

    everything = name + id_ + cls + placeholder + aria + label + hint

    if role is SemanticRole.PASSWORD:
        score += w.password_type if type_ == "password" else w.not_password_type
        if _includes_any(everything, PASSWORD_TOKENS):
            score += w.password_tokens
        if "current-password" in autocomplete or "new-password" in autocomplete:
            score += w.password_autocomplete
        if _includes_any(name + id_, USERNAME_TOKENS):
            score += w.username_tokens_on_password
    elif role in (SemanticRole.USERNAME, SemanticRole.EMAIL):
        if type_ == "password":
            score += w.password_type_on_username
        if type_ == "email":
            score += w.email_type
        if _includes_any(everything, USERNAME_TOKENS):
            score += w.username_tokens
        if "username" in autocomplete or "email" in autocomplete:
            score += w.username_autocomplete
        if _includes_any(name + id_ + placeholder + aria + label, PASSWORD_TOKENS):
            score += w.password_tokens_on_username
    elif role is SemanticRole.CODE:
        if type_ == "password":
            score += w.password_type_on_code
        if _includes_any(everything, CODE_TOKENS):
            score += w.code_tokens
        if "one-time-code" in autocomplete:
            score += w.code_autocomplete
    else:
        if type_ in w.text_types:
            score += w.text_type

    if placeholder:
        score += w.signal
    if aria:
        score += w.signal
    if label:
        score += w.signal
    return score


def best_field(
    snapshots: Sequence[FieldSnapshot],
    role: SemanticRole,
    hint_text: str = "",
    threshold: int = 25,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Optional[Tuple[FieldSnapshot, int]]:
    """
    Highest-scoring field, or None when the best score is under the threshold.

    Ties go to the earlier element in document order.
    """
    best: Optional[Tuple[FieldSnapshot, int]] = None
    for snapshot in snapshots:
        score = score_field(snapshot, role, hint_text, weights)
        if best is None or score > best[1]:
            best = (snapshot, score)
    if best is None or best[1] < threshold:
        return None
    return best


@dataclass
class ScoredField:
    """Winning field across all contexts."""
    snapshot: FieldSnapshot
    score: int
    context: Any = field(repr=False, default=None)


class FieldScorer:
    """
    Semantic field finder across the page and its frames.

    Usage:
        scorer = FieldScorer(threshold=25)
        candidate = await scorer.find_field(page, SemanticRole.PASSWORD, "password")
        if candidate:
            await candidate.locator.fill("secret")
    """

    def __init__(self, threshold: int = 25, weights: ScoringWeights = DEFAULT_WEIGHTS):
        self._threshold = threshold
        self._weights = weights

    @property
    def threshold(self) -> int:
        return self._threshold

    async def snapshot(self, ctx: Any) -> List[FieldSnapshot]:
        """Read field snapshots from one page or frame."""
        raw = await ctx.evaluate(FIELD_SNAPSHOT_JS)
        return [FieldSnapshot.from_dict(item) for item in raw or []]

    async def find_field(
        self,
        page: Any,
        role: SemanticRole,
        hint_text: str = "",
    ) -> Optional[Candidate]:
        """
        Find the best field for a role anywhere on the page.

        Every context is scored and the single best field wins; a context
        that can't be evaluated is skipped.

        Returns:
            Candidate pointing at ``input, textarea`` nth(index), or None
        """
        winner: Optional[ScoredField] = None
        for ctx in all_contexts(page):
            try:
                snapshots = await self.snapshot(ctx)
            except Exception as e:
                logger.debug(f"Field snapshot failed in {context_url(ctx) or 'page'}: {e}")
                continue
            best = best_field(snapshots, role, hint_text, self._threshold, self._weights)
            if best and (winner is None or best[1] > winner.score):
                winner = ScoredField(snapshot=best[0], score=best[1], context=ctx)

        if winner is None:
            logger.debug(f"No field scored >= {self._threshold} for role {role.value}")
            return None

        logger.debug(
            f"Field #{winner.snapshot.index} scored {winner.score} for role {role.value}"
        )
        locator = winner.context.locator(FIELD_SELECTOR).nth(winner.snapshot.index)
        return Candidate(
            locator=locator,
            strategy=f"semantic:{role.value}",
            frame_url=context_url(winner.context),
        )
