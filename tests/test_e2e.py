"""Browser tests against a local Flask app.

These need a Chromium build installed for Playwright
(``playwright install chromium``) and are skipped otherwise.
Run only them with: pytest -m integration
"""

import asyncio
import threading
from typing import Any, Awaitable, Callable

import pytest
from flask import Flask, Response, redirect, request
from playwright.async_api import Error as PlaywrightError
from werkzeug.serving import make_server

from browser_harness import Browser, HarnessConfig

pytestmark = pytest.mark.integration

CONTROLS_HTML = """
<html>
  <head><title>Controls</title></head>
  <body>
    <input name="name" value="virk">
    <select name="tags" multiple>
      <option value="a">A</option>
      <option value="b">B</option>
      <option value="c">C</option>
    </select>
    <input type="radio" name="gender" value="male">
    <input type="radio" name="gender" value="female">
    <input type="checkbox" name="terms" value="yes">
    <div id="tip" data-tip="some tip">Tip</div>
    <div id="hidden" style="display: none">secret</div>
    <div id="faded" style="opacity: 0">faded</div>
    <div id="invisible" style="visibility: hidden">invisible</div>
    <ul><li>one</li><li>two</li></ul>
  </body>
</html>
"""


def create_app() -> Flask:
    app = Flask(__name__)

    def plain(body: str) -> Response:
        return Response(body, mimetype="text/plain")

    @app.route("/")
    def index():
        return plain("done")

    @app.route("/link")
    def link():
        return '<html><body><a href="/there">Go there</a><a id="hop" href="/redirect">Hop</a></body></html>'

    @app.route("/there")
    def there():
        return plain("reached there")

    @app.route("/redirect")
    def hop():
        return redirect("/there")

    @app.route("/form")
    def form():
        return (
            '<html><body><form action="/submit" method="GET">'
            '<input name="name"><input name="age"><button type="submit">Send</button>'
            "</form></body></html>"
        )

    @app.route("/submit")
    def submit():
        return plain(request.full_path)

    @app.route("/controls")
    def controls():
        return CONTROLS_HTML

    @app.route("/cookies")
    def cookies():
        response = plain("cookies set")
        response.set_cookie("username", "virk")
        response.set_cookie("age", "22")
        return response

    @app.route("/echo")
    def echo():
        return plain(f"{request.headers.get('X-Test', '')}|{request.cookies.get('username', '')}")

    return app


@pytest.fixture(scope="module")
def base_url():
    server = make_server("127.0.0.1", 0, create_app())
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_port}"
    finally:
        server.shutdown()
        thread.join(timeout=5)


def run_in_browser(base_url: str, scenario: Callable[[Browser], Awaitable[Any]]) -> Any:
    async def main():
        browser = Browser(HarnessConfig(base_url=base_url, wait_timeout_ms=5000))
        try:
            await browser.launch()
        except PlaywrightError as error:
            return error, None
        try:
            return None, await scenario(browser)
        finally:
            await browser.close()

    error, value = asyncio.run(main())
    if error is not None:
        pytest.skip(f"Chromium is not available: {error}")
    return value


def test_visit_reports_status_and_text(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/")
        return result.status, await result.get_text(), result.text

    assert run_in_browser(base_url, scenario) == (200, "done", "done")


def test_click_and_wait_for_navigation_updates_headers(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/link")
        before = result.headers["content-type"]
        text = await result.click('a[href="/there"]').wait_for_navigation().get_text()
        return before, result.headers["content-type"], text, result.get_path()

    before, after, text, path = run_in_browser(base_url, scenario)

    assert before.startswith("text/html")
    assert after.startswith("text/plain")
    assert text == "reached there"
    assert path == "/there"


def test_redirects_report_the_final_response(base_url: str) -> None:
    async def scenario(browser: Browser):
        visited = await browser.visit("/redirect")
        linked = await browser.visit("/link")
        await linked.click("#hop").wait_for_navigation()
        return visited.status, visited.text, linked.status, linked.headers["content-type"], linked.text

    status, text, linked_status, content_type, linked_text = run_in_browser(base_url, scenario)

    assert (status, text) == (200, "reached there")
    assert linked_status == 200
    assert content_type.startswith("text/plain")
    assert linked_text == "reached there"


def test_clear_then_get_value(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/controls")
        return await result.clear('[name="name"]').get_value('[name="name"]')

    assert run_in_browser(base_url, scenario) == ""


def test_form_submission(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/form")
        return await (
            result.type('[name="name"]', "virk")
            .type('[name="age"]', 22)
            .click("button")
            .wait_for_navigation()
            .get_text()
        )

    assert run_in_browser(base_url, scenario) == "/submit?name=virk&age=22"


def test_failed_assertion_rejects_chain(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/there")
        result.assert_status(200)
        try:
            await result.chain().assert_has("reached nowhere").get_text()
        except AssertionError as error:
            return str(error)
        return None

    assert run_in_browser(base_url, scenario) == "expected 'reached there' to include 'reached nowhere'"


def test_set_cookie_headers_are_split(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/cookies")
        return result.headers["set-cookie"]

    cookies = run_in_browser(base_url, scenario)

    assert len(cookies) == 2
    assert cookies[0].startswith("username=virk")
    assert cookies[1].startswith("age=22")


def test_session_headers_and_cookies_reach_the_server(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/echo", lambda session: session.header("X-Test", "yes").cookie("username", "virk"))
        return result.text

    assert run_in_browser(base_url, scenario) == "yes|virk"


def test_form_controls(base_url: str) -> None:
    async def scenario(browser: Browser):
        result = await browser.visit("/controls")
        before = await result.get_value('[name="gender"]')
        terms_before = await result.get_value('[name="terms"]')
        values = await (
            result.select('[name="tags"]', ["a", "c"])
            .radio('[name="gender"]', "female")
            .check('[name="terms"]')
            .assert_is_checked('[name="terms"]')
            .assert_value('[name="terms"]', "yes")
            .assert_value('[name="gender"]', "female")
            .assert_is_visible("#tip")
            .assert_is_not_visible("#hidden")
            .assert_is_not_visible("#faded")
            .assert_is_not_visible("#invisible")
            .assert_attribute("#tip", "data-tip", "some tip")
            .assert_count("li", 2)
            .assert_title("Controls")
            .assert_eval("#tip", "(e, name) => e.getAttribute(name)", "some tip", args="data-tip")
            .assert_fn("(a, b) => a + b", 3, args=[1, 2])
            .get_value('[name="tags"]')
        )
        return before, terms_before, values

    before, terms_before, values = run_in_browser(base_url, scenario)

    assert before is None
    assert terms_before is None
    assert values == ["a", "c"]
