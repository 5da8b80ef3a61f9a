"""
Failure Diagnostics - Capture what the page looked like when a test failed.

On failure this writes, to the artifacts directory:
- ``failure-dom-<ts>.html``: full page HTML
- ``failure-screenshot-<ts>.png``: full-page screenshot

``<ts>`` is the UTC ISO-8601 timestamp with ``:`` and ``.`` replaced by
``-`` (e.g. ``2024-05-01T12-30-45-123Z``). Every capture step is
best-effort; a step that fails is logged and skipped.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import re

from autolocate.harness.console_helpers import ANALYZE_PAGE_CALL_JS, CONSOLE_HELPERS

logger = logging.getLogger(__name__)

_TIMESTAMP_UNSAFE = re.compile(r"[:.]")


def failure_timestamp(now: Optional[datetime] = None) -> str:
    """File-name-safe UTC timestamp, millisecond precision."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return _TIMESTAMP_UNSAFE.sub("-", iso)


@dataclass
class FailureReport:
    """What was captured for one failure."""
    timestamp: str
    error: str = ""
    url: str = ""
    title: str = ""
    dom_path: Optional[Path] = None
    screenshot_path: Optional[Path] = None
    page_summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "error": self.error,
            "url": self.url,
            "title": self.title,
            "dom_path": str(self.dom_path) if self.dom_path else None,
            "screenshot_path": str(self.screenshot_path) if self.screenshot_path else None,
            "page_summary": self.page_summary,
        }


class FailureDiagnostics:
    """
    Capture DOM and screenshot artifacts for a failed test.

    Example:
        >>> diagnostics = FailureDiagnostics(artifacts_dir="./artifacts")
        >>> report = await diagnostics.capture(page, error)
        >>> print(report.dom_path)
    """

    def __init__(self, artifacts_dir: str | Path = "."):
        self.artifacts_dir = Path(artifacts_dir)

    async def capture(self, page: Any, error: Optional[BaseException] = None) -> FailureReport:
        """
        Capture diagnostics for the page.

        Args:
            page: Playwright page, still open
            error: The failure being diagnosed, if known

        Returns:
            FailureReport; paths are None for steps that failed
        """
        report = FailureReport(timestamp=failure_timestamp(), error=str(error) if error else "")
        logger.error(f"TEST FAILED: {report.error or 'unknown error'}")

        try:
            report.url = page.url
            report.title = await page.title()
            logger.error(f"Current URL: {report.url} | Title: {report.title}")
        except Exception as e:
            logger.warning(f"Could not read page URL/title: {e}")

        try:
            summary = await page.evaluate(ANALYZE_PAGE_CALL_JS)
            report.page_summary = summary or {}
            if summary:
                logger.info(f"Page analysis: {summary}")
        except Exception as e:
            logger.warning(f"Failed to run page analysis: {e}")

        try:
            self.artifacts_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create artifacts directory {self.artifacts_dir}: {e}")

        try:
            html = await page.content()
            path = self.artifacts_dir / f"failure-dom-{report.timestamp}.html"
            path.write_text(html, encoding="utf-8")
            report.dom_path = path
            logger.info(f"DOM snapshot saved to {path}")
        except Exception as e:
            logger.warning(f"Failed to save DOM snapshot: {e}")

        try:
            path = self.artifacts_dir / f"failure-screenshot-{report.timestamp}.png"
            await page.screenshot(path=str(path), full_page=True)
            report.screenshot_path = path
            logger.info(f"Screenshot saved to {path}")
        except Exception as e:
            logger.warning(f"Failed to save screenshot: {e}")

        self.log_console_helpers()
        return report

    @staticmethod
    def log_console_helpers() -> None:
        logger.info("Browser console helpers available:")
        for usage in CONSOLE_HELPERS.values():
            logger.info(f"  - {usage}")
