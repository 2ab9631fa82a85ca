"""Resolving a bearer token to the caller operations act on behalf of."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.identity.management import ProvisionProfile
from storefront.identity.provider import get_identity_provider


@dataclass(frozen=True)
class Caller:
    user_id: str
    email: str | None = None
    is_admin: bool = False


def resolve_caller(token: str) -> Caller:
    """Verify ``token`` and load (or provision) the caller's profile.

    Raises InvalidTokenError when the identity provider rejects the token.
    """
    claims = get_identity_provider().verify_token(token)
    profile = current_domain.process(
        ProvisionProfile(user_id=claims.user_id, email=claims.email, full_name=claims.full_name),
        asynchronous=False,
    )
    return Caller(user_id=str(profile.user_id), email=profile.email, is_admin=profile.is_admin)
