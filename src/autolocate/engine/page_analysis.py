"""
Page Analysis - Snapshot of what a page offers to a test author.

Collects visible interactive elements, forms with their inputs, and
navigation links in one ``evaluate`` round trip. Used by the CLI
``analyze`` command and to generate locator snippets for a hint.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List
import json
import logging

logger = logging.getLogger(__name__)

PAGE_ANALYSIS_JS = r'''
() => {
    const interactiveElements = [];
    const forms = [];
    const navigation = [];

    const interactive = document.querySelectorAll(
        'button, a, input, select, textarea, [role="button"], [onclick]'
    );
    interactive.forEach((el) => {
        const rect = el.getBoundingClientRect();
        if (rect.width <= 0 || rect.height <= 0) return;
        const cls = typeof el.className === 'string' ? el.className.trim() : '';
        interactiveElements.push({
            type: el.tagName.toLowerCase(),
            text: (el.textContent || '').trim(),
            selector: el.tagName.toLowerCase()
                + (el.id ? '#' + el.id : '')
                + (cls ? '.' + cls.split(/\s+/).join('.') : ''),
            attributes: {
                id: el.id || '',
                className: cls,
                'aria-label': el.getAttribute('aria-label') || '',
                'data-testid': el.getAttribute('data-testid') || '',
                type: el.type || '',
                name: el.name || '',
                placeholder: el.placeholder || '',
            },
        });
    });

    document.querySelectorAll('form').forEach((form) => {
        const inputs = Array.from(form.querySelectorAll('input, textarea, select')).map((input) => ({
            type: input.type || input.tagName.toLowerCase(),
            name: input.name || '',
            placeholder: input.placeholder || '',
            selector: input.tagName.toLowerCase() + (input.id ? '#' + input.id : ''),
        }));
        forms.push({ inputs });
    });

    document.querySelectorAll('a[href]').forEach((link) => {
        const href = link.href;
        if (href && !href.startsWith('javascript:')) {
            navigation.push({
                text: (link.textContent || '').trim(),
                href: href,
                selector: `a[href="${href}"]`,
            });
        }
    });

    return { interactiveElements, forms, navigation };
}
'''


@dataclass
class InteractiveElement:
    type: str
    text: str = ""
    selector: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass
class FormInput:
    type: str
    name: str = ""
    placeholder: str = ""
    selector: str = ""


@dataclass
class NavigationLink:
    text: str
    href: str
    selector: str = ""


@dataclass
class PageAnalysis:
    """Interactive elements, forms and links found on a page."""
    interactive_elements: List[InteractiveElement] = field(default_factory=list)
    forms: List[List[FormInput]] = field(default_factory=list)
    navigation: List[NavigationLink] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageAnalysis":
        return cls(
            interactive_elements=[
                InteractiveElement(
                    type=item.get("type", ""),
                    text=item.get("text", ""),
                    selector=item.get("selector", ""),
                    attributes=dict(item.get("attributes") or {}),
                )
                for item in data.get("interactiveElements") or []
            ],
            forms=[
                [
                    FormInput(
                        type=i.get("type", ""),
                        name=i.get("name", ""),
                        placeholder=i.get("placeholder", ""),
                        selector=i.get("selector", ""),
                    )
                    for i in form.get("inputs") or []
                ]
                for form in data.get("forms") or []
            ],
            navigation=[
                NavigationLink(
                    text=item.get("text", ""),
                    href=item.get("href", ""),
                    selector=item.get("selector", ""),
                )
                for item in data.get("navigation") or []
            ],
        )

    def to_summary(self) -> Dict[str, int]:
        return {
            "interactive_elements": len(self.interactive_elements),
            "forms": len(self.forms),
            "form_inputs": sum(len(f) for f in self.forms),
            "navigation_links": len(self.navigation),
        }


async def analyze_page_structure(page: Any) -> PageAnalysis:
    """Analyze the top-level document of a page."""
    raw = await page.evaluate(PAGE_ANALYSIS_JS)
    analysis = PageAnalysis.from_dict(raw or {})
    logger.debug(f"Page analysis: {analysis.to_summary()}")
    return analysis


def locators_for(analysis: PageAnalysis, hint: str) -> List[str]:
    """
    Locator snippets for elements whose text or aria-label contains the hint.

    Returns:
        Distinct snippets in discovery order
    """
    needle = hint.lower()
    snippets: List[str] = []
    for el in analysis.interactive_elements:
        aria = el.attributes.get("aria-label", "")
        if needle not in el.text.lower() and needle not in aria.lower():
            continue
        if el.text:
            snippets.append(f"page.get_by_text({json.dumps(el.text)})")
        if aria:
            snippets.append(f"page.get_by_label({json.dumps(aria)})")
        test_id = el.attributes.get("data-testid", "")
        if test_id:
            snippets.append(f"page.get_by_test_id({json.dumps(test_id)})")
        if el.selector:
            snippets.append(f"page.locator({json.dumps(el.selector)})")
    return list(dict.fromkeys(snippets))


async def generate_smart_locators(page: Any, hint: str) -> List[str]:
    """Analyze the page and return locator snippets for a hint."""
    return locators_for(await analyze_page_structure(page), hint)
