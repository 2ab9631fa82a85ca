"""Identity provider factory.

IDENTITY_PROVIDER selects the adapter: ``jwt`` verifies tokens from the
hosted auth service with JWT_SECRET / JWT_AUDIENCE, ``fake`` (the default
outside production) accepts registered and ``dev-`` tokens.
"""

import os

from storefront.identity.provider.fake_adapter import FakeIdentityProvider
from storefront.identity.provider.jwt_adapter import JwtIdentityProvider
from storefront.identity.provider.port import IdentityProvider, InvalidTokenError, TokenClaims

__all__ = [
    "IdentityProvider",
    "InvalidTokenError",
    "TokenClaims",
    "get_identity_provider",
    "reset_identity_provider",
    "set_identity_provider",
]

_current_provider: IdentityProvider | None = None


def _default_provider() -> IdentityProvider:
    default = "jwt" if os.environ.get("PROTEAN_ENV") == "production" else "fake"
    kind = os.environ.get("IDENTITY_PROVIDER", default).lower()
    if kind == "jwt":
        return JwtIdentityProvider(
            secret=os.environ.get("JWT_SECRET", ""),
            audience=os.environ.get("JWT_AUDIENCE", "authenticated") or None,
        )
    return FakeIdentityProvider()


def get_identity_provider() -> IdentityProvider:
    global _current_provider
    if _current_provider is None:
        _current_provider = _default_provider()
    return _current_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    global _current_provider
    _current_provider = provider


def reset_identity_provider() -> None:
    global _current_provider
    _current_provider = None
