"""
Config Loader - Load and merge configuration from multiple sources.

This module provides utilities for loading configuration from YAML files,
environment variables, and explicit overrides, with proper precedence.
The step-debugging variables used by existing test scripts
(``STEP_DELAY_MS``, ``PWDEBUG``, ``STEP_CONFIRM``) are folded into the
harness section.
"""

import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv

from autolocate.config.settings import Settings
from autolocate.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PWDEBUG_OFF = ("", "0", "false")


def pwdebug_enabled(value: Optional[str]) -> bool:
    """Whether PWDEBUG turns debugging on; Playwright treats "0" and "false" as off."""
    return bool(value) and value.strip().lower() not in PWDEBUG_OFF


def step_env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Translate the step-debugging environment variables into harness overrides.

    Args:
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Overrides dict suitable for ``Settings.merge_with``
    """
    env = os.environ if environ is None else environ
    harness: Dict[str, Any] = {}

    raw_delay = env.get("STEP_DELAY_MS")
    if raw_delay is not None and raw_delay.strip() != "":
        try:
            delay = float(raw_delay)
        except ValueError:
            delay = math.nan
        if math.isfinite(delay) and delay >= 0:
            harness["step_delay_ms"] = int(delay)
        else:
            logger.warning(f"Ignoring invalid STEP_DELAY_MS={raw_delay!r}")

    if pwdebug_enabled(env.get("PWDEBUG")):
        harness["step_confirm"] = True
        harness["interactive_on_failure"] = True
    if env.get("STEP_CONFIRM") == "1":
        harness["step_confirm"] = True

    return {"harness": harness} if harness else {}


class ConfigLoader:
    """
    Configuration loader that merges settings from multiple sources.

    Priority order (highest to lowest):
    1. Explicit overrides passed to load()
    2. Step-debugging variables (STEP_DELAY_MS, PWDEBUG, STEP_CONFIRM)
    3. Config file (passed to Settings as init values)
    4. AUTOLOCATE__ environment variables, for keys the file leaves unset
    5. Default values
    """

    DEFAULT_CONFIG_PATHS = [
        Path("autolocate.yaml"),
        Path("autolocate.yml"),
        Path("config.yaml"),
        Path.home() / ".config" / "autolocate" / "config.yaml",
    ]

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Optional explicit path to config file
        """
        self.config_path = Path(config_path) if config_path else None
        self._file_config: Dict[str, Any] = {}

    def find_config_file(self) -> Optional[Path]:
        """
        Find the configuration file to load.

        Returns:
            Path to config file, or None if not found
        """
        if self.config_path:
            if not self.config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {self.config_path}",
                    {"path": str(self.config_path)},
                )
            return self.config_path

        for path in self.DEFAULT_CONFIG_PATHS:
            if path.exists():
                return path

        return None

    def load_yaml_config(self, path: Path) -> Dict[str, Any]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Configuration dictionary
        """
        try:
            with open(path, "r") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}", {"path": str(path)})
        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Config file {path} must contain a mapping", {"path": str(path)}
            )
        return config

    def load(
        self,
        env_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        """
        Load settings from all sources.

        Args:
            env_file: Optional path to .env file
            overrides: Optional dictionary of values to override

        Returns:
            Complete Settings instance
        """
        if env_file:
            load_dotenv(env_file)
        else:
            for env_path in [Path(".env"), Path(".env.local")]:
                if env_path.exists():
                    load_dotenv(env_path)
                    break

        config_file = self.find_config_file()
        if config_file:
            logger.debug(f"Loading config from {config_file}")
            self._file_config = self.load_yaml_config(config_file)

        settings = Settings(**self._file_config)

        step_overrides = step_env_overrides()
        if step_overrides:
            settings = settings.merge_with(step_overrides)

        if overrides:
            settings = settings.merge_with(overrides)

        return settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> Settings:
    """
    Convenience function to load configuration.

    Args:
        config_path: Optional path to config file
        env_file: Optional path to .env file
        **overrides: Keyword arguments to override settings

    Returns:
        Complete Settings instance

    Example:
        >>> settings = load_config()
        >>> settings = load_config(config_path="my-config.yaml")
        >>> settings = load_config(harness={"step_delay_ms": 0})
    """
    loader = ConfigLoader(config_path)
    return loader.load(env_file=env_file, overrides=overrides if overrides else None)
