"""Callable function client with parameter marshaling and exponential backoff retry"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from strafen_gateway.config import settings
from strafen_gateway.domain.exceptions import FunctionCallError
from strafen_gateway.domain.models import LatePaymentInterest
from strafen_gateway.infrastructure.observability.metrics import (
    function_call_failure_counter,
    function_call_latency_histogram,
)


class ChangeLatePaymentInterestCall:
    """
    Parameters of the changeLatePaymentInterest function.

    Without an interest the call removes the club's configuration, with one it
    replaces it.
    """

    function_name = "changeLatePaymentInterest"

    def __init__(self, club_id: str, interest: Optional[LatePaymentInterest] = None):
        self.club_id = club_id
        self.interest = interest

    @property
    def change_type(self) -> str:
        return "remove" if self.interest is None else "update"

    @property
    def parameters(self) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {"clubId": self.club_id, "changeType": self.change_type}
        if self.interest is not None:
            parameters["latePaymentInterest"] = self.interest.to_dict()
        return parameters


class FunctionsClient:
    """Client for the callable functions backend"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.functions_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.call_max_retries
        self.backoff_base = settings.call_backoff_base
        self.transport = transport

    async def call(self, function_name: str, parameters: Dict[str, Any]) -> Any:
        """
        Call a function with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2 * base, 4 * base, ...
        - Retries on 5xx errors and network failures, 4xx fail immediately

        Returns:
            The "result" field of the function response

        Raises:
            FunctionCallError: On 4xx responses or after all retries failed
        """
        url = f"{self.base_url}/{function_name}"
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with function_call_latency_histogram.labels(function=function_name).time():
                        response = await client.post(url, json={"data": parameters})
                        response.raise_for_status()
                    return response.json().get("result")

                except httpx.HTTPStatusError as e:
                    function_call_failure_counter.labels(function=function_name).inc()
                    if e.response.status_code < 500:
                        raise FunctionCallError(
                            f"{function_name} rejected with {e.response.status_code}"
                        ) from e
                    error: Exception = e

                except httpx.RequestError as e:
                    function_call_failure_counter.labels(function=function_name).inc()
                    error = e

                attempt += 1
                if attempt >= self.max_retries:
                    raise FunctionCallError(
                        f"{function_name} failed after {attempt} attempts: {error}"
                    ) from error

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logging.warning(
                    f"{function_name} failed, retrying in {backoff}s",
                    extra={"function": function_name, "attempt": attempt},
                )
                await asyncio.sleep(backoff)

    async def change_late_payment_interest(
        self, club_id: str, interest: Optional[LatePaymentInterest] = None
    ) -> Any:
        """Update or, without an interest, remove a club's late payment interest"""
        call = ChangeLatePaymentInterestCall(club_id, interest)
        return await self.call(call.function_name, call.parameters)
