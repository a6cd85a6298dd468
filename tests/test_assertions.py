import asyncio

import pytest

from browser_harness import Assert, BaseRequest, BaseResponse
from browser_harness.assertions import inspect_value


@pytest.mark.parametrize(
    "value, expected",
    [
        ("it's", "'it\\'s'"),
        (None, "null"),
        (True, "true"),
        (22, "22"),
        (["a", 1], "[ 'a', 1 ]"),
        ({"name": "virk"}, "{ name: 'virk' }"),
        ([], "[]"),
    ],
)
def test_inspect_value(value, expected) -> None:
    assert inspect_value(value) == expected


def test_failure_messages() -> None:
    assert_ = Assert()
    cases = [
        (lambda: assert_.equal(200, 404), "expected 200 to equal 404"),
        (lambda: assert_.not_equal("a", "a"), "expected 'a' to not equal 'a'"),
        (lambda: assert_.deep_equal(["a"], ["b"]), "expected [ 'a' ] to deeply equal [ 'b' ]"),
        (lambda: assert_.include("reached there", "nowhere"), "expected 'reached there' to include 'nowhere'"),
        (lambda: assert_.is_true(False), "expected false to be true"),
        (lambda: assert_.is_false(None), "expected null to be false"),
    ]
    for call, message in cases:
        with pytest.raises(AssertionError) as excinfo:
            call()
        assert str(excinfo.value) == message


def test_passing_assertions_and_custom_message() -> None:
    assert_ = Assert()
    assert_.deep_equal(("a", {"b": (1,)}), ["a", {"b": [1]}])
    assert_.include(["a", "b"], "b")
    assert_.is_true(True)

    with pytest.raises(AssertionError, match="^custom$"):
        assert_.equal(1, 2, "custom")
    with pytest.raises(AssertionError):
        assert_.include(None, "x")


def test_base_response_assertions() -> None:
    response = BaseResponse(None, {"content-type": "text/plain"})
    response.status = 200
    response.text = "ok"

    response.assert_status(200)
    response.assert_text("ok")
    response.assert_body("ok")
    response.assert_error("ok")
    response.assert_header("Content-Type", "text/plain")
    with pytest.raises(AssertionError):
        response.assert_json({"ok": True})


def test_base_request_hooks_run_in_order() -> None:
    calls = []
    request = BaseRequest()

    async def async_hook(req: BaseRequest) -> None:
        calls.append(("async", len(req.cookies)))

    request.cookie("a", 1).before(lambda req: calls.append(("sync", len(req.cookies)))).before(async_hook)
    request.after(lambda req: calls.append(("after", None)))

    asyncio.run(request.exec("before"))
    asyncio.run(request.exec("after"))

    assert calls == [("sync", 1), ("async", 1), ("after", None)]
