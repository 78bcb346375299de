from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import timedelta
from typing import Optional, Dict, Any, Iterable
import redis.asyncio as aioredis
import logging
import uuid

from core.config import JWT_SECRET_KEY, JWT_ALGORITHM, JWT_EXPIRE_MINUTES
from models.geo import utc_now
from models.user import User, has_permission, has_admin_access

logger = logging.getLogger(__name__)

# Password Hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utc_now() + (expires_delta or timedelta(minutes=JWT_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "jti": to_encode.get("jti") or uuid.uuid4().hex})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a bearer token. Raises JWTError when invalid or expired."""
    return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])


def revoked_key(jti: str) -> str:
    return f"revoked:{jti}"


async def revoke_token(redis_client: aioredis.Redis, claims: Dict[str, Any]) -> None:
    """Remember a token id as revoked until the token would have expired anyway."""
    jti = claims.get("jti")
    if not jti:
        return
    exp = claims.get("exp")
    ttl = int(exp - utc_now().timestamp()) if exp else JWT_EXPIRE_MINUTES * 60
    if ttl > 0:
        await redis_client.setex(revoked_key(jti), ttl, "1")


async def is_token_revoked(redis_client: aioredis.Redis, claims: Dict[str, Any]) -> bool:
    jti = claims.get("jti")
    if not jti:
        return False
    return bool(await redis_client.exists(revoked_key(jti)))


class SessionContext:
    """
    The identity behind one authenticated request.

    Built once from the bearer token and handed to route handlers, so role and
    permission checks all go through the same model. close() ends the session.
    """

    def __init__(self, user: Optional[User], token: Optional[str] = None, claims: Optional[Dict[str, Any]] = None):
        self.user = user
        self.token = token
        self.claims = claims or {}

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return has_admin_access(self.user)

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    def has_permission(self, *required_permissions: str) -> bool:
        return has_permission(self.user, required_permissions)

    async def close(self, redis_client: aioredis.Redis) -> None:
        if self.token:
            await revoke_token(redis_client, self.claims)
            logger.info(f"Session closed for user {self.user_id}")
        self.user = None
        self.token = None
        self.claims = {}
