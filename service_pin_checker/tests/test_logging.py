"""
Tests for lookup correlation in structured logs.
"""

import pytest

from service_pin_checker.app.auth.token_provider import Credentials, TokenProvider
from service_pin_checker.app.lookup.models import LookupRequest
from service_pin_checker.app.lookup.relay import LookupRelay
from shared.logging import (
    add_lookup_context,
    bind_lookup,
    clear_context,
    lookup_var,
    mask_taxpayer_id,
)
from shared.test_helpers import PIN_URL, StubKra, TOKEN_URL


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


@pytest.mark.parametrize("taxpayer_id,expected", [
    ("12345678", "*****678"),
    ("1234", "*234"),
    ("123", "***"),
    ("", ""),
    (None, ""),
])
def test_mask_taxpayer_id(taxpayer_id, expected):
    assert mask_taxpayer_id(taxpayer_id) == expected


def test_lookup_context_added_to_events():
    bind_lookup("12345678", "KE")

    event = add_lookup_context(None, "info", {"event": "Checking PIN"})

    assert event["taxpayer_id"] == "*****678"
    assert event["taxpayer_type"] == "KE"


def test_no_lookup_context_when_unbound():
    event = add_lookup_context(None, "info", {"event": "HTTP request"})

    assert "taxpayer_id" not in event


def test_clear_context_unbinds_lookup():
    bind_lookup("12345678", "KE")
    clear_context()

    assert lookup_var.get() is None


@pytest.mark.asyncio
async def test_relay_binds_masked_lookup():
    stub = StubKra()
    transport = stub.transport()
    provider = TokenProvider(Credentials("key", "secret"), TOKEN_URL, transport=transport)
    relay = LookupRelay(provider, PIN_URL, transport=transport)

    await relay.handle(LookupRequest("12345678", "KE"))

    assert lookup_var.get() == {"taxpayer_id": "*****678", "taxpayer_type": "KE"}
