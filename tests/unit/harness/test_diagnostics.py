"""
Tests for failure diagnostics.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from autolocate.harness.console_helpers import (
    ANALYZE_PAGE_CALL_JS,
    CONSOLE_HELPERS,
    CONSOLE_HELPERS_JS,
)
from autolocate.harness.diagnostics import FailureDiagnostics, failure_timestamp


class MockPage:
    """Mock page for capture tests."""

    def __init__(self, fail=()):
        self.url = "https://example.com/checkout"
        self.fail = set(fail)
        self.screenshots = []

    async def title(self):
        if "title" in self.fail:
            raise RuntimeError("Target closed")
        return "Checkout"

    async def evaluate(self, script, arg=None):
        if "evaluate" in self.fail:
            raise RuntimeError("Execution context was destroyed")
        assert script == ANALYZE_PAGE_CALL_JS
        return {"url": self.url, "forms": 1, "iframes": 0}

    async def content(self):
        if "content" in self.fail:
            raise RuntimeError("Target closed")
        return "<html><body><button>Pay</button></body></html>"

    async def screenshot(self, path=None, full_page=False):
        if "screenshot" in self.fail:
            raise RuntimeError("Screenshot failed")
        self.screenshots.append((path, full_page))
        with open(path, "wb") as fh:
            fh.write(b"\x89PNG")


class TestFailureTimestamp:
    """Test artifact timestamps."""

    def test_format(self):
        now = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)

        assert failure_timestamp(now) == "2024-05-01T12-30-45-123Z"

    def test_converted_to_utc(self):
        local = datetime(2024, 5, 1, 14, 30, 45, tzinfo=timezone(timedelta(hours=2)))

        assert failure_timestamp(local) == "2024-05-01T12-30-45-000Z"

    def test_file_name_safe(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z", failure_timestamp())


class TestFailureDiagnostics:
    """Test artifact capture."""

    @pytest.mark.asyncio
    async def test_writes_dom_and_screenshot(self, tmp_path):
        page = MockPage()
        diagnostics = FailureDiagnostics(artifacts_dir=tmp_path / "artifacts")

        report = await diagnostics.capture(page, AssertionError("Pay button missing"))

        assert report.dom_path.name == f"failure-dom-{report.timestamp}.html"
        assert "<button>Pay</button>" in report.dom_path.read_text(encoding="utf-8")
        assert report.screenshot_path.name == f"failure-screenshot-{report.timestamp}.png"
        assert report.screenshot_path.exists()
        assert page.screenshots == [(str(report.screenshot_path), True)]
        assert report.url == "https://example.com/checkout"
        assert report.title == "Checkout"
        assert report.page_summary["forms"] == 1
        assert report.error == "Pay button missing"

    @pytest.mark.asyncio
    async def test_each_step_best_effort(self, tmp_path):
        page = MockPage(fail=("title", "evaluate", "content"))

        report = await FailureDiagnostics(tmp_path).capture(page)

        assert report.dom_path is None
        assert report.screenshot_path is not None
        assert report.page_summary == {}

    @pytest.mark.asyncio
    async def test_everything_failing_still_returns(self, tmp_path):
        page = MockPage(fail=("title", "evaluate", "content", "screenshot"))

        report = await FailureDiagnostics(tmp_path).capture(page, RuntimeError("boom"))

        assert report.dom_path is None
        assert report.screenshot_path is None
        assert list(tmp_path.iterdir()) == []

    def test_to_dict(self, tmp_path):
        from autolocate.harness.diagnostics import FailureReport

        report = FailureReport(timestamp="t", dom_path=tmp_path / "a.html")

        data = report.to_dict()
        assert data["dom_path"].endswith("a.html")
        assert data["screenshot_path"] is None


class TestConsoleHelpers:
    """Test the injected helper script."""

    def test_every_helper_defined_in_script(self):
        for name in CONSOLE_HELPERS:
            assert f"window.{name}" in CONSOLE_HELPERS_JS

    def test_script_is_idempotent(self):
        assert "window.__autolocateHelpers" in CONSOLE_HELPERS_JS
