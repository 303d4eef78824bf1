"""Debug dump of the dashboard's interactive structure."""

from typing import Dict, List

INSPECT_JS = """
(searchTerms) => {
    const visible = (el) => el.offsetParent !== null;
    const result = {
        url: window.location.href,
        title: document.title,
        inputs: [],
        checkboxes: [],
        buttons: [],
        interactiveElements: [],
        textContent: []
    };

    document.querySelectorAll('input').forEach((input, i) => {
        result.inputs.push({
            index: i,
            type: input.type,
            name: input.name,
            placeholder: input.placeholder,
            value: input.value,
            className: String(input.className || ''),
            id: input.id,
            visible: visible(input)
        });
    });

    document.querySelectorAll('input[type="checkbox"], [role="checkbox"]').forEach((cb, i) => {
        result.checkboxes.push({
            index: i,
            checked: cb.checked || cb.getAttribute('aria-checked') === 'true',
            className: String(cb.className || ''),
            id: cb.id,
            parentText: (cb.parentElement?.textContent || '').substring(0, 100),
            visible: visible(cb)
        });
    });

    document.querySelectorAll('button, [role="button"]').forEach((btn, i) => {
        result.buttons.push({
            index: i,
            text: (btn.textContent || '').trim().substring(0, 50),
            className: String(btn.className || ''),
            visible: visible(btn)
        });
    });

    const clickable = document.querySelectorAll('[onclick], [class*="click"], [class*="btn"], [class*="button"]');
    Array.from(clickable).slice(0, 20).forEach(el => {
        result.interactiveElements.push({
            tag: el.tagName,
            className: String(el.className || ''),
            text: (el.textContent || '').trim().substring(0, 50)
        });
    });

    for (const term of searchTerms) {
        const leaves = Array.from(document.querySelectorAll('*')).filter(
            el => el.children.length === 0 && (el.textContent || '').includes(term)
        );
        if (leaves.length > 0) {
            result.textContent.push({
                searchTerm: term,
                found: leaves.length,
                firstElement: {
                    tag: leaves[0].tagName,
                    className: String(leaves[0].className || ''),
                    fullText: (leaves[0].textContent || '').substring(0, 100)
                }
            });
        }
    }

    return result;
}
"""

SEARCH_TERMS = ['Search for places', 'Most Recent Events', 'events found', 'Address']


class PageInspector:
    """Collects inputs, checkboxes, buttons and landmark text for debugging selectors."""

    def __init__(self, page, search_terms: List[str] = None):
        self.page = page
        self.search_terms = search_terms or SEARCH_TERMS

    async def inspect(self) -> Dict:
        print("\n🔍 === DEBUG: Page Structure Analysis ===\n")

        debug = await self.page.evaluate(INSPECT_JS, self.search_terms)
        self.print_report(debug)
        return debug

    @staticmethod
    def print_report(debug: Dict):
        print(f"URL: {debug.get('url')}")

        inputs = debug.get('inputs', [])
        print(f"\nInputs found: {len(inputs)}")
        for inp in inputs:
            if inp.get('visible'):
                print(f"  [{inp['index']}] type={inp.get('type')} "
                      f"placeholder=\"{inp.get('placeholder')}\" "
                      f"class=\"{(inp.get('className') or '')[:50]}\"")

        checkboxes = debug.get('checkboxes', [])
        print(f"\nCheckboxes found: {len(checkboxes)}")
        for cb in checkboxes:
            print(f"  [{cb['index']}] checked={cb.get('checked')} visible={cb.get('visible')} "
                  f"parent=\"{(cb.get('parentText') or '')[:50]}\"")

        visible_buttons = [b for b in debug.get('buttons', []) if b.get('visible')]
        print(f"\nVisible buttons: {len(visible_buttons)}")
        for btn in visible_buttons[:15]:
            print(f"  [{btn['index']}] \"{btn.get('text')}\"")

        print("\nRelevant text elements:")
        for tc in debug.get('textContent', []):
            first = tc.get('firstElement', {})
            print(f"  \"{tc['searchTerm']}\": found {tc['found']} times")
            print(f"    First: <{first.get('tag')}> class=\"{first.get('className')}\"")

        print("\n=== END DEBUG ===\n")
