"""Tests for tdfclient.response module."""

import pytest

from tdfclient.errors import AuthorizationError, NotFoundError, ResponseFormatError, ServerReportedError
from tdfclient.response import interpret


def test_sentinels_take_precedence_over_json():
    body = '{"message": "Not authorized to operate on agent. Failed to load agent"}'
    with pytest.raises(AuthorizationError):
        interpret(body, check_sentinels=True)


def test_not_found_carries_agent_id():
    with pytest.raises(NotFoundError) as info:
        interpret("Failed to load agent", check_sentinels=True, agent_id="9")
    assert info.value.agent_id == "9"


def test_sentinels_ignored_when_disabled():
    assert interpret('"Failed to load agent"', check_sentinels=False) == "Failed to load agent"


def test_parse_error_is_chained():
    with pytest.raises(ResponseFormatError) as info:
        interpret("<html>", check_sentinels=False)
    assert isinstance(info.value.__cause__, ValueError)


def test_server_error_text():
    with pytest.raises(ServerReportedError, match="code: 42. message: boom"):
        interpret('{"error": {"code": 42, "message": "boom"}}', check_sentinels=True)


@pytest.mark.parametrize("body, expected", [
    ('{"price": 123}', {"price": 123}),
    ("[1, 2]", [1, 2]),
    ('{"error": null, "ok": true}', {"error": None, "ok": True}),
])
def test_payload_returned_unchanged(body, expected):
    assert interpret(body, check_sentinels=True) == expected


@pytest.mark.parametrize("body", ['{"error": {}}', '{"error": []}', '{"error": "down"}'])
def test_empty_or_bare_error_member_is_still_an_error(body):
    """Test any JSON-truthy error member is reported, even an empty object."""
    with pytest.raises(ServerReportedError):
        interpret(body, check_sentinels=False)
