"""
Lookup form controller: input restriction, client-side pre-checks, submit
state transitions, Enter key parity with the search action.
"""
import json
import pytest
import httpx

from server import app
from routes.search import get_invitation_collection
from services.lookup_form import LookupForm, MSG_NOT_FOUND_FALLBACK, MSG_REQUEST_FAILED


def _mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")


def _recording_handler(status_code=200, body=None):
    calls = []

    def handler(request: httpx.Request):
        calls.append(json.loads(request.content))
        return httpx.Response(status_code, json=body)

    return handler, calls


FOUND = {"success": True, "data": {"name": "A", "email": "a@x.com",
                                   "phoneNumber": "0912345678", "letterURL": "http://x/y"}}


@pytest.mark.parametrize("pasted,expected", [
    ("0912-345-678", "0912345678"),
    ("tel: +84 (912) 345 678 9", "8491234567"),
    ("no digits here", ""),
])
def test_paste_keeps_only_digits(pasted, expected):
    form = LookupForm(client=None)
    form.paste(pasted)
    assert form.phone_number == expected


def test_change_clears_previous_result_and_error():
    form = LookupForm(client=None)
    form.error = "previous"
    form.result = object()
    form.change("09")
    assert form.error is None
    assert form.result is None


def test_key_down_filters_keys():
    form = LookupForm(client=None)
    assert form.key_down("0") is True
    assert form.key_down("9") is True
    assert form.key_down("a") is False
    assert form.key_down("-") is False
    assert form.key_down("v", ctrl=True) is True
    assert form.key_down("ArrowLeft") is True
    assert form.phone_number == "09"
    assert form.key_down("Backspace") is True
    assert form.phone_number == "0"


def test_key_down_stops_at_ten_digits():
    form = LookupForm(client=None)
    for key in "0912345678999":
        form.key_down(key)
    assert form.phone_number == "0912345678"


@pytest.mark.asyncio
@pytest.mark.parametrize("value,error", [
    ("", "phone number required"),
    ("091234567", "must be exactly 10 digits"),
    ("1", "must be exactly 10 digits"),
])
async def test_short_input_blocks_submission(value, error):
    handler, calls = _recording_handler(body=FOUND)
    async with _mock_client(handler) as client:
        form = LookupForm(client)
        form.change(value)
        await form.submit()
    assert form.error == error
    assert calls == []
    assert form.is_searching is False


@pytest.mark.asyncio
async def test_submit_sets_result_and_resets_searching():
    seen_searching = []

    def handler(request: httpx.Request):
        seen_searching.append(form.is_searching)
        return httpx.Response(200, json=FOUND)

    async with _mock_client(handler) as client:
        form = LookupForm(client)
        form.change("0912345678")
        await form.submit()

    assert seen_searching == [True]
    assert form.is_searching is False
    assert form.error is None
    assert form.result.name == "A"
    assert form.result.letterURL == "http://x/y"


@pytest.mark.asyncio
async def test_submit_not_found_uses_server_message():
    handler, calls = _recording_handler(404, {"error": "no record for this phone number"})
    async with _mock_client(handler) as client:
        form = LookupForm(client)
        form.change("0999999999")
        await form.submit()
    assert calls == [{"phoneNumber": "0999999999"}]
    assert form.result is None
    assert form.error == "no record for this phone number"


@pytest.mark.asyncio
async def test_submit_error_without_message_uses_fallback():
    handler, _ = _recording_handler(500, {})
    async with _mock_client(handler) as client:
        form = LookupForm(client)
        form.change("0912345678")
        await form.submit()
    assert form.error == MSG_NOT_FOUND_FALLBACK


@pytest.mark.asyncio
async def test_transport_failure_sets_generic_error_and_resets_searching():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _mock_client(handler) as client:
        form = LookupForm(client)
        form.change("0912345678")
        await form.submit()
    assert form.error == MSG_REQUEST_FAILED
    assert form.result is None
    assert form.is_searching is False


@pytest.mark.asyncio
async def test_undecodable_response_sets_generic_error():
    def handler(request: httpx.Request):
        return httpx.Response(502, content=b"<html>Bad Gateway</html>")

    async with _mock_client(handler) as client:
        form = LookupForm(client)
        form.change("0912345678")
        await form.submit()
    assert form.error == MSG_REQUEST_FAILED


@pytest.mark.asyncio
@pytest.mark.parametrize("phone", ["0912345678", "0999999999", "0912"])
async def test_enter_key_matches_search_action(phone):
    handler, calls = _recording_handler(200, FOUND)
    async with _mock_client(handler) as client:
        by_click = LookupForm(client)
        by_click.change(phone)
        await by_click.submit()

        by_enter = LookupForm(client)
        by_enter.change(phone)
        await by_enter.key_press("Enter")

    assert (by_click.result, by_click.error) == (by_enter.result, by_enter.error)
    assert len(calls) in (0, 2)


@pytest.mark.asyncio
async def test_other_key_press_does_not_submit():
    handler, calls = _recording_handler(200, FOUND)
    async with _mock_client(handler) as client:
        form = LookupForm(client)
        form.change("0912345678")
        await form.key_press("a")
    assert calls == []
    assert form.result is None


@pytest.mark.asyncio
async def test_form_against_search_endpoint(collection):
    app.dependency_overrides[get_invitation_collection] = lambda: collection
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            hit = LookupForm(client)
            hit.paste("091 234 5678")
            await hit.submit()

            miss = LookupForm(client)
            miss.paste("0999999999")
            await miss.submit()
    finally:
        app.dependency_overrides.clear()

    assert hit.result.model_dump() == {"name": "A", "email": "a@x.com",
                                       "phoneNumber": "0912345678", "letterURL": "http://x/y"}
    assert hit.error is None
    assert miss.result is None
    assert miss.error == "no record for this phone number"
