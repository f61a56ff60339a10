"""Element addressing with an explicit uniqueness contract.

``resolve`` never picks the first of several matches: it returns a
``Resolution`` that either holds exactly one locator or says how many
elements the selector hit. ``visible_only`` narrows the match set to
rendered elements, the same filter the ``:visible`` pseudo-class applies.
"""
from dataclasses import dataclass
from typing import Optional

from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from widget_site.errors import (
    AmbiguousResolution,
    MissingElement,
    ResolutionTimeout,
    UnreachableInteraction,
)

DEFAULT_TIMEOUT = 5000


@dataclass(frozen=True)
class Resolution:
    selector: str
    count: int
    locator: Optional[Locator] = None

    @property
    def ok(self) -> bool:
        return self.count == 1

    @property
    def reason(self) -> Optional[str]:
        if self.count == 0:
            return "no match"
        if self.count > 1:
            return f"selector resolved to {self.count} elements"
        return None

    def unwrap(self) -> Locator:
        if self.count == 0:
            raise MissingElement(self.selector)
        if self.count > 1:
            raise AmbiguousResolution(self.selector, self.count)
        return self.locator


def _locator(page: Page, selector: str, visible_only: bool) -> Locator:
    locator = page.locator(selector)
    if visible_only:
        locator = locator.filter(visible=True)
    return locator


def resolve(page: Page, selector: str, visible_only: bool = False) -> Resolution:
    locator = _locator(page, selector, visible_only)
    count = locator.count()
    return Resolution(selector, count, locator if count == 1 else None)


def is_visible(page: Page, selector: str, strict: bool = False, visible_only: bool = False) -> bool:
    """Visibility of the element ``selector`` names.

    Without ``strict`` this reports the first match, like ``page.is_visible``.
    With ``strict`` several matches raise ``AmbiguousResolution``.
    """
    resolution = resolve(page, selector, visible_only)
    if resolution.count == 0:
        return False
    if strict:
        return resolution.unwrap().is_visible()
    return _locator(page, selector, visible_only).first.is_visible()


def wait_for(page: Page, selector: str, state: str = "visible", timeout: float = DEFAULT_TIMEOUT):
    try:
        page.wait_for_selector(selector, state=state, timeout=timeout)
    except PlaywrightTimeoutError:
        raise ResolutionTimeout(selector, state, timeout) from None


def wait_for_text(page: Page, selector: str, text: str, timeout: float = DEFAULT_TIMEOUT):
    escaped = str(text).replace("\\", "\\\\").replace('"', '\\"')
    try:
        page.wait_for_selector(f'{selector}:has-text("{escaped}")', timeout=timeout)
    except PlaywrightTimeoutError:
        raise ResolutionTimeout(selector, f"showing {text!r}", timeout) from None


def _reachable(page: Page, selector: str, action: str, timeout: float) -> Locator:
    locator = resolve(page, selector).unwrap()
    # The element may still be shown by a render that follows the last event.
    try:
        locator.wait_for(state="visible", timeout=timeout)
    except PlaywrightTimeoutError:
        raise UnreachableInteraction(selector, action) from None
    return locator


def click(page: Page, selector: str, timeout: float = DEFAULT_TIMEOUT):
    _reachable(page, selector, "click", timeout).click()


def fill(page: Page, selector: str, text: str, commit: bool = False, timeout: float = DEFAULT_TIMEOUT):
    """Type ``text`` into a unique, visible field; ``commit`` presses Enter."""
    locator = _reachable(page, selector, "fill", timeout)
    locator.fill(str(text))
    if commit:
        locator.press("Enter")
