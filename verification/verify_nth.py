import pytest
from playwright.sync_api import Locator, Page, expect

from widget_site import resolve
from widget_site.errors import ResolutionTimeout
from widget_site.models import default_site


@pytest.fixture(autouse=True)
def open_site(page: Page, base_url):
    page.goto(base_url)
    page.wait_for_load_state()
    page.wait_for_function("() => window.widgetSite && window.widgetSite.ready")


def sum_selector(name):
    return f'tr:has-text("{name}") td.sum'


def change_num(page: Page, name: str, new_value, sum_expected, loc: Locator):
    loc.fill(str(new_value))
    loc.press("Enter")
    page.wait_for_selector(f'{sum_selector(name)}:has-text("{sum_expected}")')


def add(page: Page, name: str, sum_expected, loc: Locator):
    loc.click()
    page.wait_for_selector(f'{sum_selector(name)}:has-text("{sum_expected}")')


def reset(page: Page, name: str, loc: Locator):
    loc.click()
    page.wait_for_selector(f'{sum_selector(name)}:has-text("0")')


class TestWithNthMethod:
    def test_alvin(self, page: Page):
        reset(page, "Alvin", page.locator("button.reset").nth(0))

    def test_alan(self, page: Page):
        add(page, "Alan", 15.04, page.locator("button.add").nth(1))

    def test_jonathan(self, page: Page):
        change_num(page, "Jonathan", 2, 14, page.locator("input.num").nth(2))


class TestWithNthSelector:
    def test_alvin(self, page: Page):
        reset(page, "Alvin", page.locator("button.reset >> nth=0"))

    def test_alan(self, page: Page):
        add(page, "Alan", 15.04, page.locator("button.add >> nth=1"))

    def test_jonathan(self, page: Page):
        change_num(page, "Jonathan", 2, 14, page.locator("input.num >> nth=2"))


def test_reset_twice_stays_at_zero(page: Page):
    button = page.locator("button.reset").nth(0)
    for _ in range(2):
        button.click()
        expect(page.locator(sum_selector("Alvin"))).to_have_text("0")
    expect(page.locator("input.num").nth(0)).to_have_value("3")


def test_nth_controls_share_a_row(page: Page):
    site = default_site()
    for kind in ("input.num", "button.add", "button.reset"):
        controls = page.locator(kind)
        assert controls.count() == len(site.table)
        for i, row in enumerate(site.table):
            owner = controls.nth(i).evaluate("el => el.closest('tr').dataset.name")
            assert owner == row.name
            # Asking again within the same load gives the same row.
            assert controls.nth(i).evaluate("el => el.closest('tr').dataset.name") == owner


def test_page_matches_model_after_actions(page: Page):
    site = default_site()
    table = site.table

    resolve.fill(page, 'tr:has-text("Margaret") input.num', 4, commit=True)
    table.row("Margaret").set_value(4)
    resolve.click(page, 'tr:has-text("Margaret") button.add')
    table.row("Margaret").add()
    resolve.click(page, 'tr:has-text("Jonathan") button.add')
    table.row("Jonathan").add()

    for row in table:
        expect(page.locator(sum_selector(row.name))).to_have_text(row.display_sum)


def test_repeated_commit_adds_nothing(page: Page):
    field = page.locator("input.num").nth(2)
    expect(page.locator(sum_selector("Jonathan"))).to_have_text("22")
    field.fill("2")
    field.press("Enter")
    expect(page.locator(sum_selector("Jonathan"))).to_have_text("14")
    # A repeated commit of the same value adds nothing.
    field.press("Enter")
    expect(page.locator(sum_selector("Jonathan"))).to_have_text("14")


def test_wait_for_text_times_out(page: Page):
    with pytest.raises(ResolutionTimeout):
        resolve.wait_for_text(page, sum_selector("Alan"), "99.99", timeout=200)
