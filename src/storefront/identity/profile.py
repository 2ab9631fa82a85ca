"""Customer profile aggregate.

Profiles are keyed by the identity provider's user id and are created the
first time a caller presents a valid token. The role flag gates the admin
operations.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@storefront.aggregate
class Profile:
    user_id = Identifier(identifier=True)
    email = String(max_length=254)
    full_name = String(max_length=150)
    phone = String(max_length=30)
    avatar_url = String(max_length=500)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def provision(cls, user_id, email=None, full_name=None):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            email=email,
            full_name=full_name,
            role=Role.CUSTOMER.value,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def update_details(self, full_name=None, phone=None, avatar_url=None):
        if full_name is not None:
            if not full_name.strip():
                raise ValidationError({"full_name": ["Full name cannot be blank"]})
            self.full_name = full_name.strip()
        if phone is not None:
            self.phone = phone.strip() or None
        if avatar_url is not None:
            self.avatar_url = avatar_url or None
        self.updated_at = datetime.now(UTC)

    def assign_role(self, role):
        try:
            self.role = Role(role).value
        except ValueError:
            raise ValidationError({"role": [f"Unknown role '{role}'"]}) from None
        self.updated_at = datetime.now(UTC)
