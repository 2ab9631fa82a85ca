"""Profile commands: provisioning, self-service updates and role assignment."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.profile import Profile
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Profile")
class ProvisionProfile:
    user_id = Identifier(required=True)
    email = String(max_length=254)
    full_name = String(max_length=150)


@storefront.command(part_of="Profile")
class UpdateProfile:
    user_id = Identifier(required=True)
    full_name = String(max_length=150)
    phone = String(max_length=30)
    avatar_url = String(max_length=500)


@storefront.command(part_of="Profile")
class AssignRole:
    user_id = Identifier(required=True)
    role = String(required=True, max_length=20)


@storefront.command_handler(part_of=Profile)
class ProfileCommandHandler:
    @handle(ProvisionProfile)
    def provision(self, command):
        repo = current_domain.repository_for(Profile)
        try:
            return repo.get(command.user_id)
        except ObjectNotFoundError:
            profile = Profile.provision(
                user_id=command.user_id,
                email=command.email,
                full_name=command.full_name,
            )
            repo.add(profile)
            logger.info("Profile provisioned", user_id=str(command.user_id))
            return profile

    @handle(UpdateProfile)
    def update(self, command):
        repo = current_domain.repository_for(Profile)
        profile = repo.get(command.user_id)
        profile.update_details(
            full_name=command.full_name,
            phone=command.phone,
            avatar_url=command.avatar_url,
        )
        repo.add(profile)

    @handle(AssignRole)
    def assign_role(self, command):
        repo = current_domain.repository_for(Profile)
        profile = repo.get(command.user_id)
        profile.assign_role(command.role)
        repo.add(profile)
        logger.info("Role assigned", user_id=str(command.user_id), role=profile.role)
