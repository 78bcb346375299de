from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List

from models.user import Role, User


class UserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    role: Role = Role.CUSTOMER

    @field_validator('role')
    @classmethod
    def only_self_service_roles(cls, v: Role) -> Role:
        # Admin accounts are provisioned out of band
        if v not in (Role.CUSTOMER, Role.STORE_OWNER):
            raise ValueError("Only customer or store_owner accounts can be registered")
        return v


class UserOut(UserBase):
    # Public view of a user, no hashed_password
    id: str
    role: Role
    permissions: List[str] = []

    @classmethod
    def from_user(cls, user: User) -> 'UserOut':
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            permissions=sorted(user.granted_permissions),
        )


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    email: Optional[str] = None
    role: Optional[Role] = None
    jti: Optional[str] = None
