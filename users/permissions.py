import logging

from myapp.exceptions import AuthorizationError
from users.models import User

logger = logging.getLogger(__name__)


# The OwnershipPolicy class is the single place where handlers decide whether
# the caller may mutate a post, comment or account. Admin moderation goes
# through the admin endpoints, which never consult can_mutate.
class OwnershipPolicy:

    def can_mutate(self, actor_id: int, actor_role: str, owner_id: int) -> bool:
        return actor_id is not None and actor_id == owner_id

    def ensure_can_mutate(self, claims, owner_id: int, message: str) -> None:
        if not self.can_mutate(claims.id, claims.role, owner_id):
            logger.warning(
                f"User {claims.id} ({claims.role}) denied mutation of a resource "
                f"owned by {owner_id}"
            )
            raise AuthorizationError(message)

    def ensure_can_change_role(self, actor_id: int, target: User, new_role) -> None:
        if (
            new_role == User.USER
            and target.id == actor_id
            and target.role == User.ADMIN
        ):
            raise AuthorizationError(
                "You cannot remove your own admin role", error="Invalid operation"
            )

    def ensure_can_delete_user(self, actor_id: int, target_id: int) -> None:
        if actor_id == target_id:
            raise AuthorizationError(
                "You cannot delete your own account", error="Invalid operation"
            )


policy = OwnershipPolicy()
