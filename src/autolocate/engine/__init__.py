"""
Engine Module - Heuristic element resolution on top of Playwright.

Handles:
- Readiness waits and frame enumeration
- Semantic field scoring and multi-strategy resolution
- Fill/click/expect-visible actions
- Read-only locator suggestions and dummy-locator replacement
- Run-scoped learning and plain-English instructions
"""

from autolocate.engine.roles import SemanticRole, Hint, classify_hint, describe_hint
from autolocate.engine.frames import all_contexts
from autolocate.engine.readiness import ReadinessWaiter
from autolocate.engine.strategies import Candidate, Found, NotFound, Strategy, first_found
from autolocate.engine.field_scorer import FieldScorer, FieldSnapshot, score_field, best_field
from autolocate.engine.resolver import LocatorResolver, RESOLVE_STRATEGIES
from autolocate.engine.actions import AutoActions
from autolocate.engine.learning import LocatorLearner
from autolocate.engine.run_context import RunContext, ExecutedAction
from autolocate.engine.suggestions import (
    LocatorSuggestion,
    LocatorSuggester,
    suggest_locators,
    find_dummy_locators,
    dummy_hint,
    suggest_dummy_replacements,
    find_real_locator,
    replace_dummy_locators,
)
from autolocate.engine.instruction_parser import (
    ActionType,
    TestAction,
    TestRequirements,
    SmartActionRunner,
    understand_prompt,
    fix_common_issues,
)
from autolocate.engine.page_analysis import (
    PageAnalysis,
    analyze_page_structure,
    generate_smart_locators,
)

__all__ = [
    # Roles
    "SemanticRole",
    "Hint",
    "classify_hint",
    "describe_hint",
    # Page plumbing
    "all_contexts",
    "ReadinessWaiter",
    # Resolution
    "Candidate",
    "Found",
    "NotFound",
    "Strategy",
    "first_found",
    "FieldScorer",
    "FieldSnapshot",
    "score_field",
    "best_field",
    "LocatorResolver",
    "RESOLVE_STRATEGIES",
    # Actions
    "AutoActions",
    # Run memory
    "LocatorLearner",
    "RunContext",
    "ExecutedAction",
    # Suggestions
    "LocatorSuggestion",
    "LocatorSuggester",
    "suggest_locators",
    "find_dummy_locators",
    "dummy_hint",
    "suggest_dummy_replacements",
    "find_real_locator",
    "replace_dummy_locators",
    # Instructions
    "ActionType",
    "TestAction",
    "TestRequirements",
    "SmartActionRunner",
    "understand_prompt",
    "fix_common_issues",
    # Page analysis
    "PageAnalysis",
    "analyze_page_structure",
    "generate_smart_locators",
]
