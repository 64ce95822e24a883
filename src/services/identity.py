"""Identity lookups: registration, resolving users by email, role checks."""

from typing import List, Optional

import aiosqlite

from db import crud, models
from db.database import connect, unit_of_work
from utils.errors import ConflictError, ForbiddenError, UserNotFound, ValidationError
from utils.logger import get_logger
from utils.pure import hash_password, now_iso

_logger = get_logger(__name__)


async def require_user(conn: aiosqlite.Connection, email: str) -> models.User:
    """Resolve a user by email on the caller's connection, or raise UserNotFound."""
    user = await crud.get_user_by_email(conn, email)
    if user is None:
        _logger.debug(f"No user registered with {email}")
        raise UserNotFound()
    return user


async def register_user(
    email: str, password: str, role: models.Role = models.Role.CUSTOMER
) -> models.User:
    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("Email and password are required")
    async with unit_of_work() as conn:
        if not await crud.email_available(conn, email):
            raise ConflictError("Email already registered")
        user = await crud.insert_user(
            conn, email, hash_password(password), models.Role(role).value, now_iso()
        )
    _logger.info(f"Registered {user.role.value} {user.email} (uid={user.uid})")
    return user


async def authenticate(email: Optional[str]) -> models.User:
    """The registered user behind a caller email; ForbiddenError when there is none."""
    if not email:
        raise ForbiddenError("Access Denied. No credentials provided")
    async with connect() as conn:
        user = await crud.get_user_by_email(conn, email)
    if user is None:
        _logger.warning(f"Access denied for unknown caller {email}")
        raise ForbiddenError()
    return user


async def list_users() -> List[models.User]:
    async with connect() as conn:
        return await crud.list_users(conn)


async def get_user(uid: int, caller: models.User) -> models.User:
    """
    The user with uid. Customers may only look themselves up; admins may
    look up anyone.
    """
    if caller.role != models.Role.ADMIN and caller.uid != uid:
        raise ForbiddenError()
    async with connect() as conn:
        user = await crud.get_user(conn, uid)
    if user is None:
        raise UserNotFound()
    return user


async def require_role(email: str, role: models.Role) -> models.User:
    """Return the user behind email if they hold role, else raise ForbiddenError."""
    async with connect() as conn:
        user = await crud.get_user_by_email(conn, email)
    if user is None or user.role != role:
        _logger.warning(f"Access denied for {email}: {role.value} role required")
        raise ForbiddenError()
    return user
