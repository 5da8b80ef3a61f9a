"""
Tests for the command line interface.
"""

import pytest
from typer.testing import CliRunner

from autolocate import cli
from autolocate.engine.suggestions import API_ROLE, LocatorSuggestion

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


class TestParseCommand:
    """Test `autolocate parse`."""

    def test_parse_lists_actions(self):
        result = runner.invoke(cli.app, ["parse", 'go to https://example.com\nclick "Login"'])

        assert result.exit_code == 0
        assert "navigate" in result.output
        assert "https://example.com" in result.output
        assert "Login" in result.output

    def test_parse_nothing_recognised(self):
        result = runner.invoke(cli.app, ["parse", "make it pop"])

        assert result.exit_code == 1
        assert "No actions recognised" in result.output


class TestSuggestCommand:
    """Test `autolocate suggest` without a browser."""

    def test_suggestions_table(self, monkeypatch):
        suggestion = LocatorSuggestion(
            selector='get_by_role("button", name="Login")', api=API_ROLE,
            confidence=80, unique=True, visible=True,
        )
        seen = {}

        def fake_on_page(settings, url, work):
            seen["url"] = url
            seen["headless"] = settings.browser.headless
            return [suggestion]

        monkeypatch.setattr(cli, "_on_page", fake_on_page)

        result = runner.invoke(cli.app, ["suggest", "https://example.com", "Login"])

        assert result.exit_code == 0
        assert "80" in result.output
        assert seen == {"url": "https://example.com", "headless": True}

    def test_no_suggestions(self, monkeypatch):
        monkeypatch.setattr(cli, "_on_page", lambda settings, url, work: [])

        result = runner.invoke(cli.app, ["suggest", "https://example.com", "Ghost"])

        assert result.exit_code == 1


class TestDummiesCommand:
    """Test `autolocate dummies`."""

    def test_missing_file(self, tmp_path):
        result = runner.invoke(cli.app, ["dummies", "https://example.com", str(tmp_path / "nope.py")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_write_replaces_file(self, monkeypatch, tmp_path):
        source = tmp_path / "test_login.py"
        source.write_text('await page.click("placeholder_submitButton")\n', encoding="utf-8")
        monkeypatch.setattr(
            cli, "_on_page",
            lambda settings, url, work: 'await page.get_by_role("button", name="submit").click()\n',
        )

        result = runner.invoke(cli.app, ["dummies", "https://example.com", str(source), "--write"])

        assert result.exit_code == 0
        assert "get_by_role" in source.read_text(encoding="utf-8")

    def test_bad_config_file(self, tmp_path):
        source = tmp_path / "test_login.py"
        source.write_text("", encoding="utf-8")

        result = runner.invoke(cli.app, [
            "dummies", "https://example.com", str(source), "--config", str(tmp_path / "missing.yaml"),
        ])

        assert result.exit_code == 1
        assert "Config file not found" in result.output
