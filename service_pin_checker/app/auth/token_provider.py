"""
OAuth2 client-credentials token exchange against the KRA API.
"""

import base64
from dataclasses import dataclass, field
from typing import Optional

import httpx

from shared.errors import (
    AuthConfigError,
    AuthMalformedError,
    AuthRejectedError,
    AuthUnavailableError,
)
from shared.logging import get_logger


@dataclass(frozen=True)
class Credentials:
    """Consumer key and secret issued by the tax authority."""
    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = field(default=None, repr=False)

    @property
    def complete(self) -> bool:
        return bool(self.consumer_key) and bool(self.consumer_secret)


@dataclass(frozen=True)
class AccessToken:
    """Opaque bearer token, valid for a single downstream call."""
    value: str = field(repr=False)


class TokenProvider:
    """Fetches a fresh bearer token on every call to acquire()."""

    def __init__(
        self,
        credentials: Credentials,
        token_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.token_url = token_url
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("pin_checker.token_provider")

    def authorization_header(self) -> str:
        """Build the Basic authorization header value."""
        raw = f"{self.credentials.consumer_key}:{self.credentials.consumer_secret}"
        return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")

    async def acquire(self) -> AccessToken:
        """Exchange the credentials for an access token.

        A single attempt is made. Raises AuthConfigError when credentials are
        missing, AuthUnavailableError on transport faults, AuthRejectedError on
        a non-2xx status and AuthMalformedError when no token is returned.
        """
        if not self.credentials.complete:
            raise AuthConfigError()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    self.token_url,
                    params={"grant_type": "client_credentials"},
                    headers={"Authorization": self.authorization_header()},
                )
        except httpx.TimeoutException:
            self.logger.error("Token endpoint timeout", timeout=self.timeout)
            raise AuthUnavailableError("Token endpoint did not respond in time")
        except httpx.HTTPError as e:
            self.logger.error("Token endpoint request error", error=str(e))
            raise AuthUnavailableError(
                "Token endpoint unavailable",
                details={"http_error": str(e)}
            )

        if not response.is_success:
            self.logger.warning(
                "Token request rejected",
                status_code=response.status_code,
                response=response.text
            )
            raise AuthRejectedError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            raise AuthMalformedError("Token endpoint returned a non-JSON body")

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthMalformedError()

        value = str(token)
        # Must be sendable as an Authorization header value
        if not (value.isascii() and value.isprintable()):
            raise AuthMalformedError("Token endpoint returned a token that is not a valid header value")

        return AccessToken(value=value)
