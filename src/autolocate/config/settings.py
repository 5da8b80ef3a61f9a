"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from autolocate.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.resolver.field_score_threshold)
    25
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserSettings(BaseModel):
    """
    Browser launch settings used by the pytest ``page`` fixture.

    Attributes:
        browser_type: Playwright browser to launch
        headless: Run browser in headless mode
        slow_mo: Slow down operations by this amount (ms) - useful for debugging
        viewport_width: Browser viewport width in pixels
        viewport_height: Browser viewport height in pixels
        user_agent: Custom user agent string
        ignore_https_errors: Accept invalid certificates
        launch_args: Extra command line switches for the browser process
        base_url: Base URL for relative ``page.goto`` calls
    """
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = False
    slow_mo: int = Field(default=500, ge=0, le=5000)
    viewport_width: int = Field(default=1920, ge=320, le=3840)
    viewport_height: int = Field(default=1080, ge=240, le=2160)
    user_agent: Optional[str] = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
    )
    ignore_https_errors: bool = True
    launch_args: List[str] = Field(default_factory=lambda: [
        "--start-maximized",
        "--window-size=1920,1080",
        "--force-device-scale-factor=1",
    ])
    base_url: Optional[str] = None
    test_id_attribute: str = "data-testid"


class ReadinessSettings(BaseModel):
    """
    Best-effort page readiness waits.

    Attributes:
        dom_timeout_ms: Bound for the domcontentloaded wait
        network_idle_timeout_ms: Bound for the networkidle wait
        loader_timeout_ms: Total time to poll for loading indicators
        loader_poll_ms: Interval between loading indicator checks
    """
    dom_timeout_ms: int = Field(default=15000, ge=0, le=120000)
    network_idle_timeout_ms: int = Field(default=15000, ge=0, le=120000)
    loader_timeout_ms: int = Field(default=15000, ge=0, le=120000)
    loader_poll_ms: int = Field(default=300, ge=10, le=10000)


class ResolverSettings(BaseModel):
    """
    Element resolution and action settings.

    Attributes:
        field_score_threshold: Minimum field score accepted by the scorer
        visible_timeout_ms: Default timeout for auto_expect_visible
        visible_poll_ms: Poll interval for auto_expect_visible
        visible_check_ms: Per-attempt visibility wait
        click_timeout_ms: Timeout for the primary click
        focus_timeout_ms: Timeout for the focusing click before typing
        type_delay_ms: Delay between typed characters
        max_suggestion_matches: Queries matching more elements are not ranked
        max_learned: Bound for the run-scoped hint cache
    """
    field_score_threshold: int = Field(default=25, ge=0)
    visible_timeout_ms: int = Field(default=20000, ge=0, le=600000)
    visible_poll_ms: int = Field(default=500, ge=10, le=10000)
    visible_check_ms: int = Field(default=2000, ge=0, le=60000)
    click_timeout_ms: int = Field(default=15000, ge=0, le=120000)
    focus_timeout_ms: int = Field(default=10000, ge=0, le=120000)
    type_delay_ms: int = Field(default=30, ge=0, le=1000)
    max_suggestion_matches: int = Field(default=3, ge=1, le=50)
    max_learned: int = Field(default=256, ge=1, le=100000)


class HarnessSettings(BaseModel):
    """
    Step and failure harness settings.

    Attributes:
        step_delay_ms: Delay before each debug step (STEP_DELAY_MS)
        step_confirm: Pause at each step for manual resume (PWDEBUG / STEP_CONFIRM=1)
        interactive_on_failure: Keep the browser open and suspend on failure
        artifacts_dir: Where failure snapshots are written
    """
    step_delay_ms: int = Field(default=1000, ge=0)
    step_confirm: bool = False
    interactive_on_failure: bool = False
    artifacts_dir: str = "."


class LoggingSettings(BaseModel):
    """
    Logging configuration.

    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for file logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.

    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with AUTOLOCATE__)
    3. Config file (YAML)
    4. Default values

    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(browser=BrowserSettings(headless=True))  # Override
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTOLOCATE__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    readiness: ReadinessSettings = Field(default_factory=ReadinessSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    harness: HarnessSettings = Field(default_factory=HarnessSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.

        Args:
            overrides: Dictionary of values to override

        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()

        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base

        merged = deep_merge(current, overrides)
        return Settings(**merged)
