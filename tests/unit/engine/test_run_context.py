"""
Tests for RunContext - learned strategies and action history.
"""

import pytest
from datetime import datetime

from autolocate.engine.run_context import ExecutedAction, RunContext


class TestLearnedStrategies:
    """Test the bounded hint cache."""

    def test_remember_and_recall(self):
        ctx = RunContext()

        ctx.remember_strategy("'Login'", "role=button")

        assert ctx.learned_strategy("'Login'") == "role=button"
        assert ctx.learned_strategy("'Logout'") is None

    def test_latest_strategy_wins(self):
        ctx = RunContext()

        ctx.remember_strategy("'Login'", "role=button")
        ctx.remember_strategy("'Login'", "text")

        assert ctx.learned_strategy("'Login'") == "text"
        assert ctx.learned_count == 1

    def test_actions_are_kept_apart(self):
        ctx = RunContext()

        ctx.remember_strategy("'Search'", "label", action="fill")
        ctx.remember_strategy("'Search'", "role=button", action="click")

        assert ctx.learned_strategy("'Search'", action="fill") == "label"
        assert ctx.learned_strategy("'Search'", action="click") == "role=button"
        assert ctx.learned_strategy("'Search'", action="expect_visible") is None
        assert ctx.learned_count == 2

    def test_oldest_evicted_when_full(self):
        ctx = RunContext(max_learned=2)

        ctx.remember_strategy("a", "label")
        ctx.remember_strategy("b", "label")
        ctx.remember_strategy("c", "label")

        assert ctx.learned_strategy("a") is None
        assert ctx.learned_count == 2

    def test_recall_refreshes_entry(self):
        ctx = RunContext(max_learned=2)

        ctx.remember_strategy("a", "label")
        ctx.remember_strategy("b", "label")
        ctx.learned_strategy("a")
        ctx.remember_strategy("c", "label")

        assert ctx.learned_strategy("a") == "label"
        assert ctx.learned_strategy("b") is None

    def test_contexts_are_isolated(self):
        first = RunContext(run_id="test_a")
        second = RunContext(run_id="test_b")

        first.remember_strategy("'Login'", "role=button")

        assert second.learned_strategy("'Login'") is None


class TestActionHistory:
    """Test action recording."""

    def test_record_action(self):
        ctx = RunContext()

        ctx.record_action("click", "'Submit'", strategy="role=button", duration_ms=12)

        last = ctx.get_last_action()
        assert isinstance(last, ExecutedAction)
        assert last.success is True
        assert last.strategy == "role=button"
        assert isinstance(last.timestamp, datetime)

    def test_failed_actions(self):
        ctx = RunContext()

        ctx.record_action("click", "'a'")
        ctx.record_action("fill", "'b'", success=False, error="no input found")

        failed = ctx.get_failed_actions()
        assert len(failed) == 1
        assert failed[0].error == "no input found"

    def test_empty_history(self):
        assert RunContext().get_last_action() is None

    def test_clear(self):
        ctx = RunContext()
        ctx.remember_strategy("'x'", "text")
        ctx.record_action("click", "'x'")
        ctx.learner.learn_from_test('page.get_by_text("x")')

        ctx.clear()

        assert ctx.learned_count == 0
        assert ctx.history == []
        assert ctx.learner.recommended("text") == []

    def test_summary(self):
        ctx = RunContext(run_id="tests/test_login.py::test_login")
        ctx.remember_strategy("'x'", "text")
        ctx.record_action("click", "'x'", success=False)

        assert ctx.to_summary() == {
            "run_id": "tests/test_login.py::test_login",
            "learned_strategies": 1,
            "action_count": 1,
            "failed_actions": 1,
        }
