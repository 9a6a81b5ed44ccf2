"""
User API routes.
"""

from fastapi import APIRouter, Query
from typing import Optional

from models.user import UserCreate, UserUpdate, UserRole
from services.user_service import get_user_service
from exceptions import UserNotFoundError
from routes.common import handle_error, lookup_response, success

router = APIRouter()


@router.get("")
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    email: Optional[str] = Query(None, description="Filter by email")
):
    """List users."""
    try:
        users = get_user_service().get_all(role=role, email=email)
        return success(users, meta={"total": len(users)})
    except Exception as e:
        return handle_error(e)


@router.get("/{user_id}")
async def get_user(user_id: str):
    try:
        return lookup_response(get_user_service().find(user_id), UserNotFoundError)
    except Exception as e:
        return handle_error(e)


@router.post("", status_code=201)
async def create_user(data: UserCreate):
    """Create a user. Emails must be unique."""
    try:
        return success(get_user_service().create(data), status_code=201)
    except Exception as e:
        return handle_error(e)


@router.patch("/{user_id}")
async def update_user(user_id: str, data: UserUpdate):
    try:
        return success(get_user_service().update(user_id, data))
    except Exception as e:
        return handle_error(e)


@router.delete("/{user_id}")
async def delete_user(user_id: str):
    try:
        get_user_service().delete(user_id)
        return success({"id": user_id, "message": "User deleted"})
    except Exception as e:
        return handle_error(e)
