"""Page-context scripts evaluated through Playwright."""

from __future__ import annotations

NOT_FOUND = "__browser_harness_not_found__"

PAGE_TEXT_SCRIPT = "() => (document.body ? document.body.innerText : '')"

INNER_TEXT_SCRIPT = "(e) => e.innerText"

INNER_HTML_SCRIPT = "(e) => e.innerHTML"

IS_CHECKED_SCRIPT = "(e) => e.checked"

GET_ATTRIBUTE_SCRIPT = "(e, attr) => e.getAttribute(attr)"

GET_ATTRIBUTES_SCRIPT = """
    (e) => {
        const attrs = {};
        for (let i = 0; i < e.attributes.length; i++) {
            const node = e.attributes.item(i);
            attrs[node.nodeName] = node.value;
        }
        return attrs;
    }
"""

GET_VALUE_SCRIPT = """
    ([selector, notFound]) => {
        const nodes = document.querySelectorAll(selector);
        if (!nodes.length) {
            return notFound;
        }
        const first = nodes[0];
        if (first.type === 'radio' || first.type === 'checkbox') {
            for (const item of nodes) {
                if (item.checked) {
                    return item.value;
                }
            }
            return null;
        }
        if (first.tagName === 'SELECT' && first.multiple) {
            return Array.from(first.options)
                .filter((option) => option.selected)
                .map((option) => option.value);
        }
        return first.value;
    }
"""

IS_VISIBLE_SCRIPT = """
    (e) => {
        const style = window.getComputedStyle(e);
        return !(
            style.opacity === '0' ||
            style.display === 'none' ||
            style.visibility === 'hidden'
        );
    }
"""

SELECT_OPTIONS_SCRIPT = """
    (element, values) => {
        for (const option of element.options) {
            if (values.indexOf(option.value) > -1) {
                option.selected = true;
            }
        }
        element.dispatchEvent(new Event('input', {bubbles: true}));
        element.dispatchEvent(new Event('change', {bubbles: true}));
    }
"""

CHECK_SCRIPT = "(e) => { e.checked = true; }"

UNCHECK_SCRIPT = "(e) => { e.checked = false; }"

SUBMIT_FORM_SCRIPT = "(e) => e.submit()"

CLEAR_SCRIPT = "(e) => { e.value = ''; }"

ELEMENT_MISSING_SCRIPT = "(selector) => !document.querySelector(selector)"

COUNT_SCRIPT = "(selector) => document.querySelectorAll(selector).length"


def spread_call(fn: str) -> str:
    """Wrap ``fn`` so a list argument is spread into positional parameters."""

    return f"(args) => ({fn})(...args)"


def spread_element_call(fn: str) -> str:
    """Like :func:`spread_call`, keeping the element as the first parameter."""

    return f"(element, args) => ({fn})(element, ...args)"
