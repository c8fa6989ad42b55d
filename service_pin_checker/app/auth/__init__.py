"""
Tax authority authentication package.

Exchanges the configured consumer key and secret for a short-lived bearer
token. Tokens are requested once per lookup and never cached, so there is
no refresh logic and no shared state between requests.
"""

from .token_provider import AccessToken, Credentials, TokenProvider

__all__ = ["AccessToken", "Credentials", "TokenProvider"]
