"""
Console Helpers - Debugging functions injected into every page.

Installed as an init script so they survive navigation. Open the browser
devtools console on a paused or failed test and call, for example,
``smartFind("Login")`` or ``analyzePage()``.
"""

from typing import Dict

# Helper name -> usage line, printed when a test fails
CONSOLE_HELPERS: Dict[str, str] = {
    "inspectElement": 'inspectElement("selector") - highlight an element',
    "autoFixElement": 'autoFixElement("hint") - try to find element with multiple strategies',
    "smartFind": 'smartFind("hint", "type") - advanced element finder',
    "getClickableElements": "getClickableElements() - list all clickable elements",
    "findByText": 'findByText("text") - find elements by text content',
    "getFormElements": "getFormElements() - list all form inputs",
    "highlightByTag": 'highlightByTag("button") - highlight all elements of a tag',
    "analyzePage": "analyzePage() - page, form and iframe summary",
    "autoRetry": "autoRetry(action, retries, delay) - retry an async action",
}

CONSOLE_HELPERS_JS = r'''
(() => {
    if (window.__autolocateHelpers) return;
    window.__autolocateHelpers = true;

    const describe = (el) => ({
        tagName: el.tagName,
        text: (el.textContent || '').trim().substring(0, 80),
        id: el.id,
        className: typeof el.className === 'string' ? el.className : '',
        visible: el.offsetParent !== null,
        rect: el.getBoundingClientRect(),
    });

    const selectorFor = (el) => {
        const cls = typeof el.className === 'string' ? el.className.trim() : '';
        return el.tagName.toLowerCase()
            + (el.id ? '#' + el.id : '')
            + (cls ? '.' + cls.split(/\s+/).join('.') : '');
    };

    const byText = (hint, exact) => {
        const needle = hint.toLowerCase();
        return Array.from(document.querySelectorAll('body *')).find((el) => {
            if (el.children.length > 0) return false;
            const text = (el.textContent || '').trim();
            return exact ? text === hint : text.toLowerCase().includes(needle);
        });
    };

    const byAttribute = (hint) => {
        const q = JSON.stringify(hint);
        return document.querySelector(
            `[aria-label*=${q}], [title*=${q}], [alt*=${q}], [placeholder*=${q}]`
        );
    };

    const byPattern = (hint) => {
        const q = JSON.stringify(hint);
        return document.querySelector(
            `[data-testid*=${q}], [id*=${q}], [class*=${q}], [name*=${q}]`
        );
    };

    window.inspectElement = (selector) => {
        const el = document.querySelector(selector);
        if (!el) {
            console.log('Element not found:', selector);
            return null;
        }
        el.style.border = '3px solid red';
        el.style.backgroundColor = 'yellow';
        el.scrollIntoView({ behavior: 'smooth', block: 'center' });
        console.log('Element found and highlighted:', selector, describe(el));
        return el;
    };

    window.autoFixElement = (hint) => {
        const strategies = [
            ['exact text', () => byText(hint, true)],
            ['partial text', () => byText(hint, false)],
            ['aria-label/title', () => byAttribute(hint)],
            ['attribute pattern', () => byPattern(hint)],
        ];
        for (const [name, find] of strategies) {
            try {
                const el = find();
                if (el) {
                    console.log(`Found by ${name}`);
                    return el;
                }
            } catch (e) {}
        }
        console.log('Auto-fix failed - element not found');
        return undefined;
    };

    window.smartFind = (hint, elementType = 'any') => {
        console.log(`Smart finding: "${hint}" (type: ${elementType})`);
        const scope = elementType === 'any' ? null
            : elementType === 'input' ? 'input, textarea, select'
            : elementType === 'button' ? 'button, [role="button"], input[type="submit"], a'
            : elementType;
        const strategies = [
            () => byText(hint, true),
            () => byText(hint, false),
            () => byAttribute(hint),
            () => byPattern(hint),
        ];
        for (let i = 0; i < strategies.length; i++) {
            try {
                let el = strategies[i]();
                if (el && scope && !el.matches(scope)) {
                    el = el.closest(scope) || el.querySelector(scope);
                }
                if (el) {
                    console.log(`Found using strategy ${i + 1}`);
                    el.style.border = '2px solid blue';
                    el.style.backgroundColor = 'lightblue';
                    return el;
                }
            } catch (e) {}
        }
        console.log('Smart find failed - no strategies worked');
        return undefined;
    };

    window.getClickableElements = () => {
        const clickable = document.querySelectorAll(
            'button, a, input[type="button"], input[type="submit"], [role="button"], [onclick]'
        );
        const elements = Array.from(clickable).map((el, index) => {
            const rect = el.getBoundingClientRect();
            return {
                index,
                tagName: el.tagName,
                text: (el.textContent || '').trim().substring(0, 50),
                visible: rect.width > 0 && rect.height > 0,
                selector: selectorFor(el),
            };
        });
        console.table(elements);
        return elements;
    };

    window.findByText = (text) => {
        const elements = Array.from(document.querySelectorAll('body *')).filter(
            (el) => el.children.length === 0 && (el.textContent || '').includes(text)
        );
        elements.forEach((el, i) => {
            el.style.border = '2px solid blue';
            console.log(`[${i}] ${el.tagName}: "${(el.textContent || '').trim()}"`);
        });
        return elements;
    };

    window.getFormElements = () => {
        const inputs = document.querySelectorAll('input, textarea, select');
        const elements = Array.from(inputs).map((el, index) => ({
            index,
            tagName: el.tagName,
            type: el.type,
            name: el.name,
            placeholder: el.placeholder,
            visible: el.offsetParent !== null,
        }));
        console.table(elements);
        return elements;
    };

    window.highlightByTag = (tagName) => {
        const elements = document.querySelectorAll(tagName);
        elements.forEach((el) => {
            el.style.border = '1px solid green';
            el.style.backgroundColor = 'lightgreen';
        });
        console.log(`Found ${elements.length} ${tagName} elements`);
        return elements;
    };

    window.analyzePage = () => {
        const interactive = document.querySelectorAll(
            'button, a, input, select, textarea, [role="button"], [onclick]'
        );
        const iframes = Array.from(document.querySelectorAll('iframe')).map((f) => ({
            src: f.src,
            title: f.title,
            id: f.id,
            visible: f.offsetParent !== null,
        }));
        const summary = {
            url: window.location.href,
            title: document.title,
            interactive: interactive.length,
            forms: document.querySelectorAll('form').length,
            iframes: iframes.length,
            frames: iframes,
            viewport: { width: window.innerWidth, height: window.innerHeight },
        };
        console.log('PAGE ANALYSIS:', summary);
        return summary;
    };

    window.autoRetry = async (action, maxRetries = 3, delay = 1000) => {
        for (let i = 0; i < maxRetries; i++) {
            try {
                return await action();
            } catch (error) {
                console.log(`Attempt ${i + 1}/${maxRetries} failed:`, error);
                if (i < maxRetries - 1) {
                    await new Promise((resolve) => setTimeout(resolve, delay));
                }
            }
        }
        throw new Error(`Auto-retry failed after ${maxRetries} attempts`);
    };
})();
'''

ANALYZE_PAGE_CALL_JS = "() => (window.analyzePage ? window.analyzePage() : null)"
