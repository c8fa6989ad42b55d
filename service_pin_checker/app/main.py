"""
PIN Checker service for the PIN Checker Relay.
"""

from typing import Dict, Optional

import httpx
from fastapi import Request
from fastapi.exceptions import RequestValidationError

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import ValidationError
from .auth.token_provider import Credentials, TokenProvider
from .lookup.models import PinCheckRequest
from .lookup.relay import LookupRelay, MISSING_FIELDS_MESSAGE
from .lookup.responses import render_result, render_validation_error


class PinCheckerService(BaseService):
    """PIN checker service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__("pin_checker", config or get_config("pin_checker"))
        self.token_provider = TokenProvider(
            Credentials(self.config.kra_consumer_key, self.config.kra_consumer_secret),
            self.config.kra_token_url,
            timeout=self.config.token_timeout_seconds,
            transport=transport,
        )
        self.relay = LookupRelay(
            self.token_provider,
            self.config.kra_pin_url,
            deadline=self.config.lookup_timeout_seconds,
            transport=transport,
            metrics=self.metrics,
        )

        self._setup_pin_routes()

    def _setup_pin_routes(self):
        """Set up PIN checker routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "pin_checker",
                "message": "PIN Checker Relay - PIN Checker Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/check-pin")
        async def check_pin(payload: PinCheckRequest):
            """Verify a taxpayer PIN against the KRA PIN checker."""
            try:
                result = await self.relay.handle(payload.to_lookup_request())
            except ValidationError as e:
                self.logger.info("Rejected PIN check", error=e.message, details=e.details)
                return render_validation_error(e.message)

            return render_result(result, soft_errors=self.config.soft_errors)

        @self.app.exception_handler(RequestValidationError)
        async def request_validation_handler(request: Request, exc: RequestValidationError):
            """Answer unparseable PIN check bodies like missing fields."""
            self.logger.info("Malformed request body", path=request.url.path, errors=len(exc.errors()))
            return render_validation_error(MISSING_FIELDS_MESSAGE)

    async def _check_dependencies(self) -> Dict[str, str]:
        """Report whether the KRA credentials are configured.

        The token endpoint is not called here; each call issues a new token.
        """
        configured = self.token_provider.credentials.complete
        return {"kra_credentials": "ok" if configured else "missing"}


def create_app(config: Optional[ServiceConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
    """Create FastAPI application."""
    service = PinCheckerService(config, transport)
    return service.app


if __name__ == "__main__":
    service = PinCheckerService()
    service.run()
