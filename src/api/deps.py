from typing import Optional

from fastapi import Header

from db import models
from services import identity
from utils.errors import ForbiddenError


async def require_caller(
    x_user_email: Optional[str] = Header(default=None),
) -> models.User:
    """Resolve the caller from the X-User-Email header; any registered user passes."""
    return await identity.authenticate(x_user_email)


async def require_admin(
    x_user_email: Optional[str] = Header(default=None),
) -> models.User:
    """Resolve the caller from the X-User-Email header and insist on the admin role.

    Token issuance happens upstream; this service only checks the role.
    The header is trusted as-is, so it must be set by a trusted gateway that
    strips any client-supplied value.
    """
    if not x_user_email:
        raise ForbiddenError("Access Denied. No credentials provided")
    return await identity.require_role(x_user_email, models.Role.ADMIN)
