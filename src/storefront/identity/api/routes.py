"""Profile endpoints. Sign-up, sign-in and token refresh are served by the auth provider."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.api.dependencies import get_current_caller
from storefront.identity.api.schemas import ProfileResponse, UpdateProfileRequest
from storefront.identity.caller import Caller
from storefront.identity.management import UpdateProfile
from storefront.identity.profile import Profile

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.get("/me", response_model=ProfileResponse)
async def me(caller: Caller = Depends(get_current_caller)) -> ProfileResponse:
    profile = current_domain.repository_for(Profile).get(caller.user_id)
    return ProfileResponse.from_profile(profile)


@auth_router.put("/profile", response_model=ProfileResponse)
async def update_profile(body: UpdateProfileRequest, caller: Caller = Depends(get_current_caller)) -> ProfileResponse:
    current_domain.process(
        UpdateProfile(
            user_id=caller.user_id,
            full_name=body.full_name,
            phone=body.phone,
            avatar_url=body.avatar_url,
        ),
        asynchronous=False,
    )
    profile = current_domain.repository_for(Profile).get(caller.user_id)
    return ProfileResponse.from_profile(profile)
