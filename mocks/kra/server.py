"""
Mock KRA server providing the token and PIN checker endpoints.
"""

import secrets
from typing import Dict, Any, Optional, Set

from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials, HTTPBearer, HTTPAuthorizationCredentials

from shared.logging import get_logger

TAXPAYER_TYPES = {"KE", "NKE", "NKENR", "COMP"}


class MockKraServer:
    """Mock KRA sandbox implementation."""

    def __init__(
        self,
        consumer_key: str = "mock-consumer-key",
        consumer_secret: str = "mock-consumer-secret",
        taxpayers: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.logger = get_logger("mock.kra")
        self.app = FastAPI(title="Mock KRA", version="1.0.0")
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.issued_tokens: Set[str] = set()
        self.lookups = 0

        # Mock registry, keyed by national ID. The second record uses the
        # lower-case field names some API versions return.
        self.taxpayers = taxpayers if taxpayers is not None else {
            "12345678": {
                "TaxpayerPIN": "A123456789Z",
                "TaxpayerName": "JANE WANJIKU DOE",
                "PINStatus": "Active",
                "iTaxStatus": "Registered",
            },
            "87654321": {
                "pin": "A987654321B",
                "name": "JOHN OTIENO ROE",
                "pin_status": "Dormant",
            },
        }

        self._setup_routes()

    def _setup_routes(self):
        """Set up mock KRA routes."""

        @self.app.get("/v1/token/generate")
        async def generate_token(
            grant_type: str = Query(...),
            credentials: HTTPBasicCredentials = Depends(HTTPBasic()),
        ):
            """Client-credentials token endpoint."""
            if grant_type != "client_credentials":
                raise HTTPException(status_code=400, detail="Unsupported grant type")

            valid_key = secrets.compare_digest(credentials.username, self.consumer_key)
            valid_secret = secrets.compare_digest(credentials.password, self.consumer_secret)
            if not (valid_key and valid_secret):
                self.logger.warning("Rejected client credentials", consumer_key=credentials.username)
                return JSONResponse(status_code=401, content={
                    "error": "invalid_client",
                    "error_description": "Invalid consumer key or secret",
                })

            token = secrets.token_urlsafe(24)
            self.issued_tokens.add(token)
            return {"access_token": token, "expires_in": "3599"}

        @self.app.post("/checker/v1/pin")
        async def check_pin(
            payload: Dict[str, Any],
            credentials: HTTPAuthorizationCredentials = Depends(HTTPBearer()),
        ):
            """PIN checker by national ID."""
            self.lookups += 1
            if credentials.credentials not in self.issued_tokens:
                return JSONResponse(status_code=401, content={
                    "error": "invalid_token",
                    "message": "Access token is invalid or expired",
                })

            taxpayer_type = payload.get("TaxpayerType")
            if taxpayer_type not in TAXPAYER_TYPES:
                return JSONResponse(status_code=400, content={
                    "error": "Bad Request",
                    "message": f"Invalid TaxpayerType: {taxpayer_type}",
                })

            record = self.taxpayers.get(str(payload.get("TaxpayerID")))
            if record is None:
                return {
                    "ResponseCode": "30002",
                    "Message": "No PIN found for the given ID",
                    "Status": "OK",
                }

            response = {"ResponseCode": "30000", "Message": "Successful", "Status": "OK"}
            if "pin" in record:
                # Lower-case payloads carry no response code
                response = {"status": "Success"}
            response.update(record)
            return response


def create_app():
    """Create mock KRA application."""
    server = MockKraServer()
    return server.app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8090)
