"""
Tests for locator suggestions and dummy-locator replacement.
"""

import pytest

from autolocate.engine.suggestions import (
    API_LABEL,
    API_LOCATOR,
    API_ROLE,
    API_TEXT,
    LocatorSuggester,
    LocatorSuggestion,
    confidence_for,
    dummy_hint,
    find_dummy_locators,
    find_real_locator,
    replace_dummy_locators,
    suggest_dummy_replacements,
    suggest_locators,
)

from .fakes import FakeElement, FakeFrame, FakePage


# =============================================================================
# CONFIDENCE
# =============================================================================

class TestConfidence:
    """Test the additive confidence score."""

    def test_unique_visible_role(self):
        # 35 base + 20 unique + 15 visible + 10 role reason
        assert confidence_for(API_ROLE, True, True, ("role button name match",)) == 80

    def test_text_not_unique_hidden(self):
        # 20 - 10 - 15 clamps to zero
        assert confidence_for(API_TEXT, False, False, ("text node match",)) == 0

    def test_test_id_bonus(self):
        assert confidence_for(API_LOCATOR, True, True, ("data-testid contains",)) == 55

    def test_clamped(self):
        for api in (API_ROLE, API_LABEL, API_TEXT, API_LOCATOR):
            for unique in (True, False):
                for visible in (True, False):
                    score = confidence_for(api, unique, visible, ("aria role data-testid",))
                    assert 0 <= score <= 100


class TestLocatorSuggestion:
    """Test snippet rendering."""

    def test_code_for_api_call(self):
        s = LocatorSuggestion(
            selector='get_by_label("Email")', api=API_LABEL, confidence=60,
            unique=True, visible=True,
        )
        assert s.code == 'page.get_by_label("Email")'

    def test_code_for_css(self):
        s = LocatorSuggestion(
            selector='button:has-text("Go")', api=API_LOCATOR, confidence=40,
            unique=True, visible=True,
        )
        assert s.code == 'page.locator("button:has-text(\\"Go\\")")'

    def test_to_dict(self):
        s = LocatorSuggestion(
            selector="x", api=API_TEXT, confidence=1, unique=False,
            visible=False, reasons=("text node match",),
        )
        assert s.to_dict()["reasons"] == ["text node match"]


# =============================================================================
# SUGGESTER
# =============================================================================

class TestLocatorSuggester:
    """Test read-only ranking."""

    @pytest.mark.asyncio
    async def test_button_ranks_first(self):
        page = FakePage([FakeElement(tag="button", text="Submit")])

        suggestions = await suggest_locators(page, "Submit")

        assert suggestions[0].api == API_ROLE
        assert suggestions[0].selector == 'get_by_role("button", name="Submit")'
        assert suggestions[0].unique
        assert suggestions[0].confidence == 80
        assert [s.confidence for s in suggestions] == sorted(
            (s.confidence for s in suggestions), reverse=True
        )

    @pytest.mark.asyncio
    async def test_zero_and_too_many_matches_excluded(self):
        buttons = [FakeElement(tag="button", text="Next") for _ in range(4)]
        page = FakePage(buttons)

        suggestions = await suggest_locators(page, "Next")

        assert suggestions == []

    @pytest.mark.asyncio
    async def test_three_matches_kept_as_not_unique(self):
        links = [FakeElement(tag="a", text="More") for _ in range(3)]
        page = FakePage(links)

        suggestions = await suggest_locators(page, "More")

        role = [s for s in suggestions if s.api == API_ROLE]
        assert len(role) == 1
        assert role[0].unique is False

    @pytest.mark.asyncio
    async def test_hidden_match_scores_lower(self):
        page = FakePage([FakeElement(tag="button", text="Help", visible=False)])

        suggestions = await suggest_locators(page, "Help")

        assert suggestions[0].visible is False
        assert suggestions[0].confidence == 35 + 20 - 15 + 10

    @pytest.mark.asyncio
    async def test_css_query(self):
        el = FakeElement(tag="div", test_id="checkout-btn")
        page = FakePage([el])
        page.css['[data-testid*="checkout" i]'] = [el]

        suggestions = await suggest_locators(page, "checkout")

        assert suggestions[0].api == API_LOCATOR
        assert suggestions[0].code == 'page.locator("[data-testid*=\\"checkout\\" i]")'

    @pytest.mark.asyncio
    async def test_frames_reported(self):
        frame = FakeFrame([FakeElement(tag="button", text="Pay")], url="https://pay.example.com/")
        page = FakePage([], frames=[frame])

        suggestions = await suggest_locators(page, "Pay")

        assert suggestions[0].frame_url == "https://pay.example.com/"

    @pytest.mark.asyncio
    async def test_idempotent_and_read_only(self):
        button = FakeElement(tag="button", text="Save")
        page = FakePage([button, FakeElement(tag="input", type="text", label="Save as")])

        first = await LocatorSuggester().suggest(page, "Save")
        second = await LocatorSuggester().suggest(page, "Save")

        assert first == second
        assert button.clicks == 0
        assert button.events == []

    @pytest.mark.asyncio
    async def test_failing_query_skipped(self):
        class FlakyPage(FakePage):
            def get_by_label(self, hint, **kwargs):
                raise RuntimeError("boom")

        page = FlakyPage([FakeElement(tag="button", text="OK")])

        suggestions = await suggest_locators(page, "OK")

        assert suggestions[0].api == API_ROLE


# =============================================================================
# DUMMY LOCATORS
# =============================================================================

class TestDummyLocators:
    """Test scaffold-name detection and replacement."""

    def test_find_dummy_locators(self):
        text = '''
        await page.click("placeholder_submitButton")
        await page.locator('[data-testid="dummy_login"]').click()
        await page.get_by_text("placeholder email").fill("x")
        await page.click("placeholder_submitButton")
        '''

        found = find_dummy_locators(text)

        assert "placeholder_submitButton" in found
        assert found.count("placeholder_submitButton") == 1
        assert '[data-testid="dummy_login"]' in found
        assert 'get_by_text("placeholder email")' in found

    def test_no_dummies(self):
        assert find_dummy_locators('page.get_by_role("button", name="Go")') == []

    @pytest.mark.parametrize("match,expected", [
        ("placeholder_submitButton", "submit"),
        ("dummy_search_field", "search"),
        ('[data-testid="dummy_login_link"]', "login"),
        ('get_by_text("placeholder Forgot password")', "forgot password"),
        ('getByRole("button", { name: "placeholder Sign In" })', "sign in"),
        ("placeholder_button", "button"),
    ])
    def test_dummy_hint(self, match, expected):
        assert dummy_hint(match) == expected

    @pytest.mark.asyncio
    async def test_submit_button_scenario(self):
        page = FakePage([FakeElement(tag="button", text="Submit")])

        replacements = await suggest_dummy_replacements(page, 'click("placeholder_submitButton")')

        top = replacements["placeholder_submitButton"][0]
        assert top.api == API_ROLE
        assert top.selector.startswith('get_by_role("button"')

    @pytest.mark.asyncio
    async def test_replacement_limit(self):
        el = FakeElement(tag="button", text="Go", label="Go", aria_label="Go", test_id="go")
        page = FakePage([el])
        for selector in ('[data-testid*="go" i]', 'button:has-text("go")', '[aria-label*="go" i]'):
            page.css[selector] = [el]

        replacements = await suggest_dummy_replacements(page, "dummy_go")

        assert 0 < len(replacements["dummy_go"]) <= 6

    @pytest.mark.asyncio
    async def test_unmatched_dummy_left_out(self):
        page = FakePage([])

        assert await suggest_dummy_replacements(page, "placeholder_ghost") == {}
        assert await find_real_locator(page, "placeholder_ghost") is None

    @pytest.mark.asyncio
    async def test_replace_dummy_locators(self):
        page = FakePage([FakeElement(tag="button", text="Submit")])
        source = 'await page.click("placeholder_submitButton")\nawait page.click("placeholder_ghost")\n'

        updated = await replace_dummy_locators(page, source)

        assert 'page.get_by_role("button", name="submit")' in updated
        assert "placeholder_submitButton" not in updated
        assert "placeholder_ghost" in updated
