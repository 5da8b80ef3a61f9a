"""
autolocate - CLI Entry Point.

Configuration Priority:
    1. CLI options (--visible, --config)
    2. Environment variables (AUTOLOCATE__BROWSER__HEADLESS, STEP_DELAY_MS, ...)
    3. Config file (autolocate.yaml)

Usage:
    autolocate suggest https://example.com/login "Sign in"
    autolocate dummies https://example.com/login tests/test_login.py --write
    autolocate parse 'go to https://example.com and click "Login"'
    autolocate analyze https://example.com
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from autolocate.config import Settings, load_config
from autolocate.engine.instruction_parser import understand_prompt
from autolocate.engine.page_analysis import analyze_page_structure
from autolocate.engine.readiness import ReadinessWaiter
from autolocate.engine.suggestions import (
    LocatorSuggester,
    replace_dummy_locators,
    suggest_dummy_replacements,
)
from autolocate.exceptions import AutolocateError
from autolocate.session import BrowserSession
from autolocate.utils.logging import setup_logging

app = typer.Typer(
    name="autolocate",
    help="Hint-based Playwright locators: suggestions, dummy replacement and page analysis",
    add_completion=False,
)

console = Console()

T = TypeVar("T")


def _settings(config: Optional[Path], visible: bool, verbose: bool) -> Settings:
    try:
        settings = load_config(
            config_path=config,
            browser={"headless": not visible},
        )
    except AutolocateError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    level = "DEBUG" if verbose else settings.logging.level
    setup_logging(level, settings.logging.file, settings.logging.json_format)
    return settings


def _on_page(settings: Settings, url: str, work: Callable[[Any], Awaitable[T]]) -> T:
    """Open the URL in a fresh browser, wait for it to settle and run ``work``."""
    async def run() -> T:
        async with BrowserSession(settings.browser) as session:
            page = session.page
            await page.goto(url)
            await ReadinessWaiter(settings.readiness).ensure_ready(page)
            return await work(page)

    try:
        return asyncio.run(run())
    except AutolocateError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _suggestion_table(title: str, suggestions) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan", box=None)
    table.add_column("Conf", justify="right", width=5)
    table.add_column("Locator")
    table.add_column("Unique", justify="center")
    table.add_column("Visible", justify="center")
    table.add_column("Frame", style="dim")
    for s in suggestions:
        table.add_row(
            str(s.confidence),
            s.code,
            "✓" if s.unique else "-",
            "✓" if s.visible else "-",
            s.frame_url,
        )
    return table


ConfigOption = typer.Option(None, "--config", "-c", help="Path to autolocate YAML config")
VisibleOption = typer.Option(False, "--visible", "-v", help="Run with visible browser")
VerboseOption = typer.Option(False, "--verbose", help="Enable verbose output")


@app.command()
def suggest(
    url: str = typer.Argument(..., help="Page to open"),
    hint: str = typer.Argument(..., help="Human-readable element hint"),
    limit: int = typer.Option(10, "--limit", "-n", help="Max suggestions to show"),
    config: Optional[Path] = ConfigOption,
    visible: bool = VisibleOption,
    verbose: bool = VerboseOption,
):
    """Rank locators for a hint on a live page."""
    settings = _settings(config, visible, verbose)
    suggester = LocatorSuggester(max_matches=settings.resolver.max_suggestion_matches)
    suggestions = _on_page(settings, url, lambda page: suggester.suggest(page, hint))

    if not suggestions:
        console.print(f"[yellow]⚠ No locator matched {hint!r} (1-3 elements required)[/yellow]")
        raise typer.Exit(1)
    console.print(_suggestion_table(f"Suggestions for {hint!r}", suggestions[:limit]))


@app.command()
def dummies(
    url: str = typer.Argument(..., help="Page the test runs against"),
    file: Path = typer.Argument(..., help="Test source file to scan"),
    write: bool = typer.Option(False, "--write", "-w", help="Rewrite the file with live locators"),
    config: Optional[Path] = ConfigOption,
    visible: bool = VisibleOption,
    verbose: bool = VerboseOption,
):
    """Suggest live replacements for scaffold locators (placeholder_*, dummy_*, ...)."""
    if not file.exists():
        console.print(f"[red]✗ File not found: {file}[/red]")
        raise typer.Exit(1)

    settings = _settings(config, visible, verbose)
    text = file.read_text(encoding="utf-8")
    suggester = LocatorSuggester(max_matches=settings.resolver.max_suggestion_matches)

    if write:
        updated = _on_page(settings, url, lambda page: replace_dummy_locators(page, text, suggester))
        if updated == text:
            console.print("[yellow]⚠ Nothing replaced[/yellow]")
            return
        file.write_text(updated, encoding="utf-8")
        console.print(f"[green]✓ Updated {file}[/green]")
        return

    found = _on_page(settings, url, lambda page: suggest_dummy_replacements(page, text, suggester))
    if not found:
        console.print(f"[yellow]⚠ No dummy locators with live matches in {file}[/yellow]")
        return
    for dummy, suggestions in found.items():
        console.print(_suggestion_table(dummy, suggestions))
        console.print()


@app.command()
def parse(
    prompt: str = typer.Argument(..., help="Plain-English test description"),
):
    """Show the actions understood from a prompt (no browser)."""
    requirements = understand_prompt(prompt)

    console.print(Panel.fit(
        f"[bold blue]{requirements.test_name}[/bold blue]\n"
        f"[dim]{requirements.description}[/dim]",
        border_style="blue",
    ))
    if not requirements.actions:
        console.print("[yellow]⚠ No actions recognised[/yellow]")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("#", style="dim", width=3)
    table.add_column("Action")
    table.add_column("Target")
    table.add_column("Value")
    for i, action in enumerate(requirements.actions, 1):
        table.add_row(
            str(i),
            action.type.value,
            action.target or action.url or "",
            action.value or action.expected or "",
        )
    console.print(table)


@app.command()
def analyze(
    url: str = typer.Argument(..., help="Page to analyze"),
    config: Optional[Path] = ConfigOption,
    visible: bool = VisibleOption,
    verbose: bool = VerboseOption,
):
    """Summarize interactive elements, forms and links on a page."""
    settings = _settings(config, visible, verbose)
    analysis = _on_page(settings, url, analyze_page_structure)

    summary = analysis.to_summary()
    console.print(Panel.fit(
        "\n".join(f"[dim]{k.replace('_', ' ')}:[/dim] {v}" for k, v in summary.items()),
        title=url,
        border_style="blue",
    ))

    table = Table(title="Interactive elements", show_header=True, header_style="bold cyan", box=None)
    table.add_column("Type", width=8)
    table.add_column("Text")
    table.add_column("Selector", style="dim")
    for el in analysis.interactive_elements:
        table.add_row(el.type, el.text[:60], el.selector)
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
