"""
PIN lookup package.

Holds the relay that calls the KRA PIN checker with a fresh bearer token
under a hard deadline, and the reduction of its inconsistent responses
into a Found / NotFound / Failure result.
"""

from .models import CanonicalResult, Failure, FailureKind, Found, LookupRequest, NotFound
from .relay import LookupRelay

__all__ = [
    "CanonicalResult",
    "Failure",
    "FailureKind",
    "Found",
    "LookupRelay",
    "LookupRequest",
    "NotFound",
]
