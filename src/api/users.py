"""FastAPI routes for registration and user lookups."""

from fastapi import APIRouter, Depends, Path

from api.deps import require_admin, require_caller
from api.schemas import (
    RegisterUserRequest,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
    UserSchema,
)
from db import models
from services import identity
from utils.pure import SQLITE_MAX_INT

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", status_code=201, response_model=UserResponse)
async def register_user(body: RegisterUserRequest) -> UserResponse:
    user = await identity.register_user(body.email, body.password)
    return UserResponse(
        message="User Registered successfully", user_data=UserSchema.from_record(user)
    )


@router.get(
    "/allUsers",
    response_model=UserListResponse,
    dependencies=[Depends(require_admin)],
)
async def all_users() -> UserListResponse:
    users = await identity.list_users()
    return UserListResponse(
        message="Users retrieved successfully",
        users=[UserSchema.from_record(u) for u in users],
    )


@router.get("/singleuser/{uid}", response_model=UserDetailResponse)
async def single_user(
    uid: int = Path(le=SQLITE_MAX_INT),
    caller: models.User = Depends(require_caller),
) -> UserDetailResponse:
    user = await identity.get_user(uid, caller)
    return UserDetailResponse(
        message="User details retrieved successfully", user=UserSchema.from_record(user)
    )
