# auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from pydantic import ValidationError
from datetime import timedelta
from typing import Optional
from jose import JWTError
from motor.motor_asyncio import AsyncIOMotorDatabase
import logging

from dependencies.database import DatabaseDependency
from dependencies.redis import RedisDependency
from core.config import JWT_EXPIRE_MINUTES, USER_COLLECTION
from models.geo import utc_now
from models.user import User
from services.location.store import RedisLocationStore
from schemas.user import UserCreate, UserOut, Token, TokenData
from services.session import (
    SessionContext,
    get_password_hash,
    verify_password,
    create_access_token,
    decode_access_token,
    is_token_revoked,
)

logger = logging.getLogger(__name__)

# OAuth2
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)


async def authenticate_user(db: AsyncIOMotorDatabase, email: str, password: str) -> Optional[User]:
    user_data = await db[USER_COLLECTION].find_one({"email": email})
    if not user_data:
        return None
    if not verify_password(password, user_data["hashed_password"]):
        return None
    return User(**user_data)


async def get_session(
    db: DatabaseDependency,
    redis_client: RedisDependency,
    token: str = Depends(oauth2_scheme)
) -> SessionContext:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        token_data = TokenData(email=payload.get("sub"), role=payload.get("role"), jti=payload.get("jti"))
    except (JWTError, ValidationError) as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise credentials_exception
    if token_data.email is None:
        raise credentials_exception
    if await is_token_revoked(redis_client, payload):
        raise credentials_exception

    user_data = await db[USER_COLLECTION].find_one({"email": token_data.email})
    if user_data is None:
        raise credentials_exception
    return SessionContext(User(**user_data), token=token, claims=payload)


async def get_optional_session(
    db: DatabaseDependency,
    redis_client: RedisDependency,
    token: Optional[str] = Depends(optional_oauth2_scheme)
) -> SessionContext:
    """Anonymous visitors get an unauthenticated session instead of a 401."""
    if not token:
        return SessionContext(None)
    return await get_session(db=db, redis_client=redis_client, token=token)


async def get_current_user(session: SessionContext = Depends(get_session)) -> User:
    return session.user


def require_permissions(*permissions: str):
    """Dependency factory: the caller must hold every listed permission."""
    async def checker(session: SessionContext = Depends(get_session)) -> SessionContext:
        if not session.has_permission(*permissions):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return session
    return checker


async def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return session


# FastAPI Authentication Endpoints
@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data_in: UserCreate,
    db: DatabaseDependency
):
    if await db[USER_COLLECTION].find_one({"email": user_data_in.email}):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    user_to_insert = User(
        email=user_data_in.email,
        full_name=user_data_in.full_name,
        hashed_password=get_password_hash(user_data_in.password),
        role=user_data_in.role,
    )

    try:
        await db[USER_COLLECTION].insert_one(user_to_insert.model_dump(by_alias=True, exclude_none=True))
    except Exception as e:
        logger.error(f"Registration failed for {user_data_in.email}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed due to an internal error")

    return UserOut.from_user(user_to_insert)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    db: DatabaseDependency,
    form_data: OAuth2PasswordRequestForm = Depends()
):
    """
    Generate a new access token for the user upon login
    """
    user = await authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    await db[USER_COLLECTION].update_one({"_id": user.id}, {"$set": {"last_login": utc_now()}})
    access_token = create_access_token(
        data={"sub": user.email, "role": user.role.value},
        expires_delta=timedelta(minutes=JWT_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/users/me", response_model=UserOut)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return UserOut.from_user(current_user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    redis_client: RedisDependency,
    session: SessionContext = Depends(get_session)
):
    """
    Revoke the current token and clear the user's stored location.
    """
    await RedisLocationStore(redis_client).clear(session.user_id)
    await session.close(redis_client)
