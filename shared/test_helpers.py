"""
Test helper functions and factory methods for the PIN Checker Relay.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx

TOKEN_URL = "https://kra.test/v1/token/generate"
PIN_URL = "https://kra.test/checker/v1/pin"


class KraPayloadFactory:
    """Factory for PIN checker response bodies."""

    @staticmethod
    def found(pin: str = "A123", name: str = "Jane Doe", **fields: Any) -> Dict[str, Any]:
        payload = {"ResponseCode": "30000", "TaxpayerPIN": pin, "TaxpayerName": name}
        payload.update(fields)
        return payload

    @staticmethod
    def found_lowercase(pin: str = "A123", name: str = "Jane Doe", **fields: Any) -> Dict[str, Any]:
        payload = {"status": "Success", "pin": pin, "name": name}
        payload.update(fields)
        return payload

    @staticmethod
    def no_record() -> Dict[str, Any]:
        return {"ResponseCode": "30002", "Message": "No PIN found for the given ID"}

    @staticmethod
    def token(value: str = "test-access-token") -> Dict[str, Any]:
        return {"access_token": value, "expires_in": "3599"}


@dataclass
class StubKra:
    """Deterministic stand-in for the KRA endpoints behind an httpx.MockTransport.

    Bodies may be a dict (sent as JSON) or a str (sent verbatim). Setting
    ``lookup_delay`` makes the PIN endpoint sleep before answering; if the
    sleep completes, ``late_completions`` is incremented.
    """
    token_status: int = 200
    token_body: Union[Dict[str, Any], str] = field(default_factory=KraPayloadFactory.token)
    lookup_status: int = 200
    lookup_body: Union[Dict[str, Any], str] = field(default_factory=KraPayloadFactory.found)
    lookup_delay: float = 0.0
    lookup_error: Optional[Exception] = None
    token_error: Optional[Exception] = None
    token_requests: List[httpx.Request] = field(default_factory=list)
    lookup_requests: List[httpx.Request] = field(default_factory=list)
    late_completions: int = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/token/generate"):
            self.token_requests.append(request)
            if self.token_error:
                raise self.token_error
            return _response(self.token_status, self.token_body)

        self.lookup_requests.append(request)
        if self.lookup_error:
            raise self.lookup_error
        if self.lookup_delay:
            await asyncio.sleep(self.lookup_delay)
            self.late_completions += 1
        return _response(self.lookup_status, self.lookup_body)


def _response(status_code: int, body: Union[Dict[str, Any], str]) -> httpx.Response:
    if isinstance(body, str):
        return httpx.Response(status_code, content=body.encode("utf-8"))
    return httpx.Response(status_code, content=json.dumps(body), headers={"Content-Type": "application/json"})
