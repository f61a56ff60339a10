from playwright.sync_api import sync_playwright
import os
import tempfile

from widget_site.render import build_site
from widget_site.server import StaticServer, wait_on


def run(playwright, server):
    browser = playwright.chromium.launch(headless=True)
    page = browser.new_page()

    print(f"Navigating to {server.url}")
    page.goto(server.url)
    page.wait_for_function("() => window.widgetSite && window.widgetSite.ready")

    # Open the first select and bump Alan so the shot shows both widgets in use
    page.click(".select1")
    page.wait_for_selector(".select1 ul", state="visible")
    page.locator("button.add").nth(1).click()
    page.wait_for_selector('tr:has-text("Alan") td.sum:has-text("15.04")')

    page.screenshot(path="verification/widgets.png", full_page=True)
    print("Screenshot saved to verification/widgets.png")

    browser.close()


if __name__ == "__main__":
    os.makedirs("verification", exist_ok=True)
    with tempfile.TemporaryDirectory() as site_dir:
        build_site(site_dir)
        with StaticServer(site_dir, port=0) as server:
            wait_on(server.url, delay=0)
            with sync_playwright() as playwright:
                run(playwright, server)
