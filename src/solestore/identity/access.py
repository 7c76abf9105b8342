"""Who is calling, and what they may do.

Authorization is an explicit capability check: each role maps to a fixed set
of capabilities and every operation boundary asks for the one it needs.
"""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from solestore.errors import AccessDenied, AuthenticationFailed
from solestore.identity.user.user import Role, User


class Capability(Enum):
    SHOP = "shop"  # own cart, own orders
    WRITE_REVIEWS = "write_reviews"
    VIEW_ALL_ORDERS = "view_all_orders"
    CHANGE_ORDER_STATUS = "change_order_status"
    VIEW_ORDER_STATS = "view_order_stats"
    MANAGE_CATALOGUE = "manage_catalogue"
    MANAGE_USERS = "manage_users"
    MODERATE_REVIEWS = "moderate_reviews"


_CUSTOMER_CAPABILITIES = frozenset({Capability.SHOP, Capability.WRITE_REVIEWS})

ROLE_CAPABILITIES = {
    Role.USER: _CUSTOMER_CAPABILITIES,
    Role.ADMIN: frozenset(Capability),
}


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of an operation."""

    user_id: str
    role: str
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def can(self, capability: Capability) -> bool:
        try:
            role = Role(self.role)
        except ValueError:
            return False
        return capability in ROLE_CAPABILITIES[role]

    def require(self, capability: Capability) -> None:
        if not self.can(capability):
            raise AccessDenied({"error": ["Forbidden - Admin access required"]})

    def owns(self, owner_id) -> bool:
        return str(owner_id) == str(self.user_id)

    def ensure_owner_or_admin(self, owner_id, message="Access denied") -> None:
        if not (self.is_admin or self.owns(owner_id)):
            raise AccessDenied({"error": [message]})


def principal_for(claims: dict) -> Principal:
    """Build a principal from verified token claims.

    The account is re-read so that deleted users lose access immediately and
    role changes apply without re-issuing tokens.
    """
    user_id = claims.get("sub")
    if not user_id:
        raise AuthenticationFailed({"error": ["Unauthorized - Invalid token"]})
    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        raise AuthenticationFailed({"error": ["Unauthorized - User no longer exists"]}) from None
    return Principal(user_id=str(user.id), role=user.role, email=user.email)
