"""Unit tests for the callable functions client"""

import json
import httpx
import pytest
from strafen_gateway.domain.exceptions import FunctionCallError
from strafen_gateway.infrastructure.clients.functions import (
    ChangeLatePaymentInterestCall,
    FunctionsClient,
)


def make_client(handler) -> FunctionsClient:
    client = FunctionsClient(base_url="http://functions.test/", transport=httpx.MockTransport(handler))
    client.backoff_base = 0
    return client


def test_change_call_update_parameters(monthly_interest):
    """Test update carries the interest configuration"""
    call = ChangeLatePaymentInterestCall("club_1", monthly_interest)

    assert call.function_name == "changeLatePaymentInterest"
    assert call.parameters == {
        "clubId": "club_1",
        "changeType": "update",
        "latePaymentInterest": {
            "interestFreePeriod": {"value": 0, "unit": "day"},
            "interestPeriod": {"value": 1, "unit": "month"},
            "interestRate": 0.01,
            "compoundInterest": False,
        },
    }


def test_change_call_remove_parameters():
    """Test missing interest means removal"""
    call = ChangeLatePaymentInterestCall("club_1")
    assert call.parameters == {"clubId": "club_1", "changeType": "remove"}


async def test_change_late_payment_interest_posts_data(monthly_interest):
    """Test request URL and body of the function call"""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"result": None})

    result = await make_client(handler).change_late_payment_interest("club_1", monthly_interest)

    assert result is None
    assert len(requests) == 1
    assert str(requests[0].url) == "http://functions.test/changeLatePaymentInterest"
    body = json.loads(requests[0].content)
    assert body["data"]["changeType"] == "update"
    assert body["data"]["clubId"] == "club_1"


async def test_call_retries_server_errors():
    """Test 5xx responses are retried until success"""
    responses = iter([httpx.Response(503), httpx.Response(500), httpx.Response(200, json={"result": "ok"})])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    client = make_client(handler)
    client.max_retries = 3

    assert await client.call("changeLatePaymentInterest", {}) == "ok"


async def test_call_fails_after_max_retries():
    """Test FunctionCallError once all attempts failed"""
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    client.max_retries = 2

    with pytest.raises(FunctionCallError):
        await client.change_late_payment_interest("club_1")

    assert len(attempts) == 2


async def test_call_does_not_retry_client_errors():
    """Test 4xx responses fail immediately"""
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(400, json={"error": {"message": "invalid-argument"}})

    with pytest.raises(FunctionCallError):
        await make_client(handler).change_late_payment_interest("club_1")

    assert len(attempts) == 1
