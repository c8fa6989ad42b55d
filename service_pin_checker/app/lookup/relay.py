"""
Authenticated, deadline-bounded relay to the KRA PIN checker.
"""

import asyncio
from typing import Optional

import httpx

from shared.errors import AuthenticationError, ValidationError
from shared.logging import bind_lookup, get_logger
from shared.metrics import MetricsCollector

from ..auth.token_provider import AccessToken, TokenProvider
from .models import CanonicalResult, Failure, FailureKind, LookupRequest
from .reduction import parse_body, reduce_response

MISSING_FIELDS_MESSAGE = "Missing required fields: TaxpayerID and TaxpayerType are required"
TIMEOUT_MESSAGE = "downstream did not respond in time"


class LookupRelay:
    """Relays a taxpayer lookup and reduces the answer to a canonical result."""

    def __init__(
        self,
        token_provider: TokenProvider,
        lookup_url: str,
        deadline: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.token_provider = token_provider
        self.lookup_url = lookup_url
        self.deadline = deadline
        self.transport = transport
        self.metrics = metrics
        self.logger = get_logger("pin_checker.relay")

    async def handle(self, request: LookupRequest) -> CanonicalResult:
        """Look up a taxpayer.

        Raises ValidationError before any network activity when either field
        is missing. Every other failure is returned as a Failure result.
        """
        if not request.taxpayer_id or not request.taxpayer_type:
            raise ValidationError(
                MISSING_FIELDS_MESSAGE,
                details={
                    "TaxpayerID": bool(request.taxpayer_id),
                    "TaxpayerType": bool(request.taxpayer_type),
                },
            )

        bind_lookup(request.taxpayer_id, request.taxpayer_type)
        self.logger.info("Checking PIN")

        if self.metrics:
            with self.metrics.time_operation("pin_lookup_duration_seconds"):
                result = await self._relay(request)
            self.metrics.increment_counter("pin_lookups_total", outcome=result.outcome)
        else:
            result = await self._relay(request)

        self.logger.info("PIN check completed", outcome=result.outcome)
        return result

    async def _relay(self, request: LookupRequest) -> CanonicalResult:
        try:
            token = await self.token_provider.acquire()
        except AuthenticationError as e:
            self.logger.error("Token acquisition failed", code=e.code, error=e.message)
            self._count_token("error")
            return Failure(
                kind=FailureKind.AUTHENTICATION_FAILED,
                message=e.message,
                taxpayer_id=request.taxpayer_id,
                error="Authentication failed",
            )
        self._count_token("ok")

        try:
            response = await self._post_lookup(request, token)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            self.logger.error("PIN checker timeout", deadline=self.deadline)
            return Failure(
                kind=FailureKind.TIMEOUT,
                message=TIMEOUT_MESSAGE,
                taxpayer_id=request.taxpayer_id,
                error="Request timeout",
            )
        except httpx.HTTPError as e:
            self.logger.error("PIN checker request error", error=str(e))
            return Failure(
                kind=FailureKind.TRANSPORT_ERROR,
                message=f"PIN checker unavailable: {type(e).__name__}",
                taxpayer_id=request.taxpayer_id,
                error="Service Unavailable",
            )

        body = parse_body(response)
        self.logger.debug(
            "PIN checker raw response",
            status_code=response.status_code,
            body=body or response.text
        )
        if not response.is_success:
            self.logger.warning(
                "PIN checker error status",
                status_code=response.status_code,
                response=response.text
            )

        return reduce_response(request, response.status_code, body)

    async def _post_lookup(self, request: LookupRequest, token: AccessToken) -> httpx.Response:
        # Leaving the client context closes the connection, including after
        # wait_for has cancelled the in-flight post.
        async with httpx.AsyncClient(timeout=self.deadline, transport=self.transport) as client:
            return await asyncio.wait_for(
                client.post(
                    self.lookup_url,
                    json=request.downstream_payload(),
                    headers={"Authorization": f"Bearer {token.value}"},
                ),
                timeout=self.deadline,
            )

    def _count_token(self, status: str):
        if self.metrics:
            self.metrics.increment_counter("token_requests_total", status=status)
