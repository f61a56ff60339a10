import pytest
from playwright.sync_api import Error, Page, expect

from widget_site import resolve
from widget_site.errors import AmbiguousResolution, MissingElement, ResolutionTimeout, UnreachableInteraction


@pytest.fixture(autouse=True)
def open_site(page: Page, base_url):
    page.goto(base_url)
    page.wait_for_load_state()
    page.wait_for_function("() => window.widgetSite && window.widgetSite.ready")


def assert_strict_violation(page: Page):
    with pytest.raises(Error) as excinfo:
        page.is_visible("ul", strict=True, timeout=100)
    assert "strict mode violation: selector resolved to 2 elements" in excinfo.value.message


# Two selects driven through :visible, the way page-level selectors do it.
def test_two_selects_without_locators(page: Page):
    assert not page.is_visible("ul:visible")

    page.click(".select1")
    page.wait_for_selector(".select1 ul")
    # A bare "ul" may point at the hidden list of the other select.
    assert page.is_visible("ul:visible")
    assert page.is_visible(".select1 ul")
    assert not page.is_visible(".select2 ul")

    page.click('.select1 ul li:has-text("Option 2")')
    page.wait_for_selector(".select1 ul", state="hidden")
    assert not page.is_visible("ul")
    assert not page.is_visible("ul:visible")
    assert not page.is_visible(".select1 ul")
    assert not page.is_visible(".select2 ul")

    page.click(".select2")
    page.wait_for_selector(".select2 ul")

    assert_strict_violation(page)

    assert page.is_visible("ul:visible")
    assert not page.is_visible(".select1 ul")
    assert page.is_visible(".select2 ul")


def test_two_selects_with_locators(page: Page):
    visible_ul = page.locator("ul:visible")
    select1 = page.locator(".select1")
    select1_ul = page.locator(".select1 ul")
    select2 = page.locator(".select2")
    select2_ul = select2.locator("ul")

    assert not visible_ul.is_visible()

    select1.click()
    select1_ul.element_handle().wait_for_element_state("visible")
    assert visible_ul.is_visible()
    assert select1_ul.is_visible()
    assert not select2_ul.is_visible()

    page.click('.select1 ul li:has-text("Option 2")')
    page.wait_for_selector(".select1 ul", state="hidden")
    assert not page.is_visible("ul")
    assert not page.is_visible("ul:visible")
    assert not page.is_visible(".select1 ul")
    assert not page.is_visible(".select2 ul")

    select2.click()
    select2_ul.element_handle().wait_for_element_state("visible")

    assert_strict_violation(page)

    assert visible_ul.is_visible()
    assert not select1_ul.is_visible()
    assert select2_ul.is_visible()


def test_selection_updates_label_and_closes(page: Page):
    page.click(".select1")
    page.click('.select1 ul li:has-text("Option 3")')
    expect(page.locator(".select1 .label")).to_have_text("Option 3")
    expect(page.locator(".select1 ul")).to_be_hidden()
    expect(page.locator(".select2 .label")).to_have_text("Select...")


def test_trigger_click_closes_open_list(page: Page):
    page.click(".select2")
    expect(page.locator(".select2 ul")).to_be_visible()
    page.click(".select2 .label")
    expect(page.locator(".select2 ul")).to_be_hidden()
    expect(page.locator(".select2 .label")).to_have_text("Select...")


def test_selects_open_independently(page: Page):
    page.click(".select1")
    page.click(".select2")
    expect(page.locator(".select1 ul")).to_be_visible()
    expect(page.locator(".select2 ul")).to_be_visible()
    assert resolve.resolve(page, "ul", visible_only=True).count == 2


def test_resolve_visible_only_finds_the_open_list(page: Page):
    page.click(".select2")
    resolve.wait_for(page, ".select2 ul")

    resolution = resolve.resolve(page, "ul", visible_only=True)
    assert resolution.ok
    assert resolution.unwrap().evaluate("el => el.closest('.select').dataset.id") == "select2"

    unfiltered = resolve.resolve(page, "ul")
    assert not unfiltered.ok
    assert unfiltered.reason == "selector resolved to 2 elements"
    with pytest.raises(AmbiguousResolution) as excinfo:
        unfiltered.unwrap()
    assert excinfo.value.count == 2


def test_resolve_is_visible_strict(page: Page):
    assert not resolve.is_visible(page, "ul")
    assert not resolve.is_visible(page, "ul", visible_only=True)
    with pytest.raises(AmbiguousResolution, match="strict mode violation: selector resolved to 2 elements"):
        resolve.is_visible(page, "ul", strict=True)

    resolve.click(page, ".select1")
    assert resolve.is_visible(page, "ul", strict=True, visible_only=True)
    assert resolve.is_visible(page, ".select1 ul", strict=True)


def test_resolve_rejects_hidden_and_missing_elements(page: Page):
    with pytest.raises(UnreachableInteraction):
        resolve.click(page, '.select1 ul li:has-text("Option 1")', timeout=200)
    with pytest.raises(MissingElement):
        resolve.click(page, ".select3")
    with pytest.raises(AmbiguousResolution):
        resolve.click(page, "div.select")


def test_resolve_timeout_is_not_ambiguity(page: Page):
    with pytest.raises(ResolutionTimeout) as excinfo:
        resolve.wait_for(page, ".select1 ul", timeout=200)
    assert not isinstance(excinfo.value, AmbiguousResolution)
    assert excinfo.value.condition == "visible"


def test_resolve_click_waits_for_late_render(page: Page):
    page.evaluate("() => setTimeout(() => document.querySelector('.select1 .label').click(), 300)")
    resolve.click(page, '.select1 ul li:has-text("Option 2")', timeout=3000)
    expect(page.locator(".select1 .label")).to_have_text("Option 2")
    expect(page.locator(".select1 ul")).to_be_hidden()
