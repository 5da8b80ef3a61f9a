"""
Pytest configuration and fixtures.
"""

import pytest

STEP_ENV_VARS = ("STEP_DELAY_MS", "PWDEBUG", "STEP_CONFIRM")


@pytest.fixture(autouse=True)
def clean_step_env(monkeypatch):
    """Keep the developer's step-debugging variables out of unit tests."""
    for name in STEP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    from autolocate.config import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def quick_settings():
    """Provide settings with short waits for tests."""
    from autolocate.config import (
        BrowserSettings,
        HarnessSettings,
        ReadinessSettings,
        ResolverSettings,
        Settings,
    )

    return Settings(
        browser=BrowserSettings(headless=True, slow_mo=0),
        readiness=ReadinessSettings(
            dom_timeout_ms=100,
            network_idle_timeout_ms=100,
            loader_timeout_ms=100,
            loader_poll_ms=20,
        ),
        resolver=ResolverSettings(visible_poll_ms=20, visible_check_ms=50),
        harness=HarnessSettings(step_delay_ms=0),
    )
