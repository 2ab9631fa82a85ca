"""Pydantic schemas for the profile endpoints."""

from datetime import datetime

from pydantic import BaseModel


class ProfileResponse(BaseModel):
    id: str
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    role: str
    created_at: datetime | None = None

    @classmethod
    def from_profile(cls, profile) -> "ProfileResponse":
        return cls(
            id=str(profile.user_id),
            email=profile.email,
            full_name=profile.full_name,
            phone=profile.phone,
            avatar_url=profile.avatar_url,
            role=profile.role,
            created_at=profile.created_at,
        )


class UpdateProfileRequest(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "full_name": "Budi Santoso",
                    "phone": "081234567890",
                    "avatar_url": None,
                }
            ]
        }
    }
