"""
Run Context - Memory scoped to a single test run.

Handles:
- Which strategy resolved each hint, per action (bounded LRU)
- Locator patterns learned from passing test code
- Action history for diagnostics

One RunContext is created per test by the pytest fixture and passed to
the action façade explicitly. Nothing here is shared between tests.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging

from autolocate.engine.learning import LocatorLearner

logger = logging.getLogger(__name__)


@dataclass
class ExecutedAction:
    """Record of an executed action."""
    action_type: str
    hint: str
    success: bool
    strategy: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    duration_ms: float = 0
    error: Optional[str] = None


@dataclass
class RunContext:
    """
    Memory for one test run.

    Example:
        >>> ctx = RunContext(max_learned=2)
        >>> ctx.remember_strategy("'Login'", "role=button", action="click")
        >>> ctx.learned_strategy("'Login'", action="click")
        'role=button'
        >>> ctx.learned_strategy("'Login'", action="fill") is None
        True

    Entries are diagnostic: the resolver always runs its strategies in
    their fixed order.
    """

    run_id: str = ""
    max_learned: int = 256
    learner: LocatorLearner = field(default_factory=LocatorLearner)
    history: List[ExecutedAction] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)

    _strategies: "OrderedDict[Tuple[str, str], str]" = field(default_factory=OrderedDict, repr=False)

    def remember_strategy(self, hint_key: str, strategy: str, action: str = "locate") -> None:
        """Record the strategy that resolved a hint for an action, evicting the oldest entry when full."""
        key = (action, hint_key)
        self._strategies.pop(key, None)
        self._strategies[key] = strategy
        while len(self._strategies) > self.max_learned:
            (evicted_action, evicted_hint), _ = self._strategies.popitem(last=False)
            logger.debug(f"Evicted learned {evicted_action} strategy for {evicted_hint}")

    def learned_strategy(self, hint_key: str, action: str = "locate") -> Optional[str]:
        """Strategy that last resolved this hint for an action, if any."""
        key = (action, hint_key)
        strategy = self._strategies.get(key)
        if strategy is not None:
            self._strategies.move_to_end(key)
        return strategy

    @property
    def learned_count(self) -> int:
        return len(self._strategies)

    def record_action(
        self,
        action_type: str,
        hint: str,
        success: bool = True,
        strategy: Optional[str] = None,
        duration_ms: float = 0,
        error: Optional[str] = None,
    ) -> None:
        """Record an executed action in history."""
        self.history.append(ExecutedAction(
            action_type=action_type,
            hint=hint,
            success=success,
            strategy=strategy,
            duration_ms=duration_ms,
            error=error,
        ))

    def get_last_action(self) -> Optional[ExecutedAction]:
        """Get the most recent action."""
        return self.history[-1] if self.history else None

    def get_failed_actions(self) -> List[ExecutedAction]:
        """Get all failed actions."""
        return [a for a in self.history if not a.success]

    def clear(self) -> None:
        """Clear all learned data and history."""
        self._strategies.clear()
        self.learner.clear()
        self.history.clear()

    def to_summary(self) -> Dict[str, Any]:
        """Get a summary for debugging/logging."""
        return {
            "run_id": self.run_id,
            "learned_strategies": self.learned_count,
            "action_count": len(self.history),
            "failed_actions": len(self.get_failed_actions()),
        }
