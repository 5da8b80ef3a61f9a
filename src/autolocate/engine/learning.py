"""
Locator Learner - Collect locator and action patterns from working test code.

Feed it the source of a passing test and it remembers which locator calls
were used, grouped by the kind of element they usually target. The table
is bounded per kind and lives on a RunContext, never in module state.

Example:
    >>> learner = LocatorLearner()
    >>> learner.learn_from_test('await page.get_by_role("button", name="Login").click()')
    >>> learner.recommended("button")
    ['page.get_by_role("button", name="Login")']
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List
import re
import logging

logger = logging.getLogger(__name__)

LOCATOR_CALL = re.compile(r'page\.(?:get_by_\w+|getBy\w+|locator)\([^)]*\)')
ACTION_CALL = re.compile(r'\b(click|fill|select_option|select|wait_for|waitFor)\s*\([^)]*\)')


@dataclass(frozen=True)
class ActionPattern:
    """A learned action call."""
    type: str
    pattern: str
    success: bool = True


def locator_kind(locator: str) -> str:
    """Element kind a locator call usually targets."""
    if "get_by_role" in locator or "getByRole" in locator:
        return "button"
    if "get_by_label" in locator or "getByLabel" in locator:
        return "input"
    if "get_by_text" in locator or "getByText" in locator:
        return "text"
    return "generic"


class LocatorLearner:
    """Bounded table of locators seen in passing tests."""

    def __init__(self, max_per_kind: int = 50):
        self._max_per_kind = max_per_kind
        self._locators: Dict[str, "OrderedDict[str, None]"] = {}
        self._actions: Dict[str, ActionPattern] = {}

    def learn_from_test(self, test_code: str) -> int:
        """
        Extract locator and action calls from test source.

        Returns:
            Number of locator calls learned
        """
        learned = 0
        for match in LOCATOR_CALL.findall(test_code):
            bucket = self._locators.setdefault(locator_kind(match), OrderedDict())
            bucket.pop(match, None)
            bucket[match] = None
            while len(bucket) > self._max_per_kind:
                bucket.popitem(last=False)
            learned += 1

        for match in ACTION_CALL.finditer(test_code):
            self._actions[match.group(1)] = ActionPattern(type=match.group(1), pattern=match.group(0))

        logger.debug(f"Learned {learned} locator calls, {len(self._actions)} action kinds")
        return learned

    def recommended(self, kind: str) -> List[str]:
        """Locators seen for a kind, most recent last."""
        return list(self._locators.get(kind, ()))

    def action_pattern(self, action_type: str) -> ActionPattern | None:
        return self._actions.get(action_type)

    def clear(self) -> None:
        self._locators.clear()
        self._actions.clear()
