from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Iterable, Dict, FrozenSet
from bson import ObjectId
from enum import Enum
from datetime import datetime
import uuid

from models.geo import utc_now


class Role(str, Enum):
    CUSTOMER = "customer"
    STORE_OWNER = "store_owner"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class Permission:
    """Permission names understood by the API."""
    STORES_VIEW = "stores:view"
    STORES_CREATE = "stores:create"
    STORES_MANAGE = "stores:manage"
    LOCATION_TRACK = "location:track"
    USERS_MANAGE = "users:manage"


# Default grants per role. Explicit per-user permissions are added on top.
ROLE_PERMISSIONS: Dict[Role, FrozenSet[str]] = {
    Role.CUSTOMER: frozenset({
        Permission.STORES_VIEW,
        Permission.LOCATION_TRACK,
    }),
    Role.STORE_OWNER: frozenset({
        Permission.STORES_VIEW,
        Permission.LOCATION_TRACK,
        Permission.STORES_CREATE,
    }),
    Role.ADMIN: frozenset({
        Permission.STORES_VIEW,
        Permission.LOCATION_TRACK,
        Permission.STORES_CREATE,
        Permission.STORES_MANAGE,
        Permission.USERS_MANAGE,
    }),
    Role.SUPER_ADMIN: frozenset(),
}

ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


class User(BaseModel):
    """
    A Siraha Bazaar account. Customers, store owners and administrators all
    live in the same 'users' collection and differ only by role.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    email: str
    hashed_password: str
    full_name: Optional[str] = None
    role: Role = Role.CUSTOMER
    permissions: List[str] = Field(default_factory=list, description="Grants on top of the role defaults.")
    created_at: datetime = Field(default_factory=utc_now)
    last_login: Optional[datetime] = None

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    @field_validator('id', mode='before')
    @classmethod
    def convert_id_to_string(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v

    @property
    def granted_permissions(self) -> FrozenSet[str]:
        return ROLE_PERMISSIONS.get(self.role, frozenset()) | frozenset(self.permissions)


def has_permission(user: Optional[User], required_permissions: Iterable[str]) -> bool:
    """True if the user holds every required permission. Super admins hold all of them."""
    if user is None:
        return False
    if user.role == Role.SUPER_ADMIN:
        return True
    granted = user.granted_permissions
    return all(permission in granted for permission in required_permissions)


def has_admin_access(user: Optional[User]) -> bool:
    return user is not None and user.role in ADMIN_ROLES
