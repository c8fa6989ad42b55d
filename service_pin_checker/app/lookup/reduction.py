"""
Reduction of raw PIN checker responses into canonical results.

The KRA API is inconsistent about field names and signals "no record" with a
successful HTTP status, so every response is reduced here into exactly one of
Found, NotFound or Failure.
"""

from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple

import httpx

from .models import CanonicalResult, Failure, FailureKind, Found, LookupRequest, NotFound

SUCCESS_RESPONSE_CODE = "30000"

# Marks the alias table default that resolves to the requested identifier
REQUESTED_ID = object()


class FieldAlias(NamedTuple):
    """Output attribute, the raw names it may appear under (in precedence order), and its default."""
    output: str
    aliases: Tuple[str, ...]
    default: Any


FOUND_FIELDS: Tuple[FieldAlias, ...] = (
    FieldAlias("pin", ("TaxpayerPIN", "pin"), REQUESTED_ID),
    FieldAlias("taxpayer_name", ("TaxpayerName", "name", "taxpayer_name"), None),
    FieldAlias("pin_status", ("PINStatus", "pin_status"), "Active"),
    FieldAlias("itax_status", ("iTaxStatus", "itax_status"), "Registered"),
)

CANONICAL_OUTPUTS = frozenset(alias.output for alias in FOUND_FIELDS)


def parse_body(response: httpx.Response) -> Dict[str, Any]:
    """Decode a response body, treating anything but a JSON object as empty."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def resolve_field(body: Mapping[str, Any], alias: FieldAlias, requested_id: Optional[str] = None) -> Any:
    """Return the first truthy aliased value, else the alias default."""
    for name in alias.aliases:
        value = body.get(name)
        if value:
            return value
    if alias.default is REQUESTED_ID:
        return requested_id
    return alias.default


def has_success_indicator(body: Mapping[str, Any]) -> bool:
    return (
        body.get("ResponseCode") == SUCCESS_RESPONSE_CODE
        or bool(body.get("TaxpayerPIN"))
        or bool(body.get("pin"))
        or body.get("status") == "Success"
    )


def build_found(request: LookupRequest, body: Mapping[str, Any]) -> Found:
    resolved = {
        alias.output: resolve_field(body, alias, request.taxpayer_id)
        for alias in FOUND_FIELDS
    }
    extra = {key: value for key, value in body.items() if key not in CANONICAL_OUTPUTS}
    return Found(taxpayer_id=request.taxpayer_id, extra=extra, **resolved)


def reduce_response(request: LookupRequest, status_code: int, body: Mapping[str, Any]) -> CanonicalResult:
    """Reduce a downstream status and decoded body to a canonical result."""
    if 200 <= status_code < 300:
        if has_success_indicator(body):
            return build_found(request, body)
        return NotFound(taxpayer_id=request.taxpayer_id)

    error = str(body.get("error") or "API Error")
    if status_code == 404:
        return Failure(
            kind=FailureKind.NOT_FOUND_UPSTREAM,
            message=f"invalid identifier: {request.taxpayer_id}",
            taxpayer_id=request.taxpayer_id,
            error=error,
        )

    return Failure(
        kind=FailureKind.UPSTREAM_ERROR,
        message=str(body.get("message") or "request failed"),
        taxpayer_id=request.taxpayer_id,
        error=error,
    )
