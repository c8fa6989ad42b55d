"""
PIN Checker Service package for the PIN Checker Relay.

This package exposes the FastAPI application that verifies a taxpayer's
PIN against the KRA PIN checker on behalf of the front-end:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.auth: OAuth2 client-credentials token exchange.
- app.lookup: Bounded-time lookup call and response reduction.

Design notes:
- Module import must not perform network calls. All IO happens in route
  handlers.
- Use the shared/ utilities for config, logging, metrics and errors.
- The service is stateless; tokens are fetched per lookup and never cached.
"""
