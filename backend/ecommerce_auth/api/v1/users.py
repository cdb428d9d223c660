"""User profile and admin user-management endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from ecommerce_auth.api.deps import (
    current_identity,
    json_response,
    load_json,
    require_auth,
    require_role,
    timing,
)
from ecommerce_auth.core.container import get_container
from ecommerce_auth.models.user import UserRole
from ecommerce_auth.schemas import (
    MetaSchema,
    ProfileUpdateSchema,
    UserFilterSchema,
    UserSchema,
    UserStatusSchema,
)
from ecommerce_auth.services.users.dto import ProfileUpdateIn, UserListIn

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
meta_schema = MetaSchema()
profile_update_schema = ProfileUpdateSchema()
user_status_schema = UserStatusSchema()
user_filter_schema = UserFilterSchema()

ADMIN = UserRole.ADMIN.value


# ------------------------------ Profile ----------------------------------- #


@bp.get("/profile")
@require_auth
@timing
def get_profile():
    user = get_container().users.get_profile(current_identity().user_id)
    return json_response({"user": user_schema.dump(user)})


@bp.put("/profile")
@require_auth
@timing
def update_profile():
    """Update the caller's first and/or last name."""

    data = load_json(profile_update_schema)
    user = get_container().users.update_profile(
        current_identity().user_id, ProfileUpdateIn(**data)
    )
    return json_response(
        {"user": user_schema.dump(user)}, message="Profile updated successfully"
    )


@bp.delete("/profile")
@require_auth
@timing
def deactivate_profile():
    """Soft-delete the caller's account."""

    get_container().users.deactivate_account(current_identity().user_id)
    return json_response(message="Account deactivated successfully")


# ------------------------------- Admin ------------------------------------ #


@bp.get("")
@require_auth
@require_role(ADMIN)
@timing
def list_users():
    """Return paginated users, newest first."""

    filters = user_filter_schema.load(request.args)
    page = get_container().users.list_users(UserListIn(**filters))
    return json_response(
        {
            "users": user_list_schema.dump(page.items),
            "pagination": meta_schema.dump(page.meta),
        }
    )


@bp.get("/<int:user_id>")
@require_auth
@require_role(ADMIN)
@timing
def get_user(user_id: int):
    user = get_container().users.get_user(user_id)
    return json_response({"user": user_schema.dump(user)})


@bp.put("/<int:user_id>/status")
@require_auth
@require_role(ADMIN)
@timing
def update_user_status(user_id: int):
    data = load_json(user_status_schema)
    user = get_container().users.update_user_status(user_id, is_active=data["is_active"])
    state = "activated" if user.is_active else "deactivated"
    return json_response(
        {"user": user_schema.dump(user)}, message=f"User {state} successfully"
    )


@bp.delete("/<int:user_id>")
@require_auth
@require_role(ADMIN)
@timing
def delete_user(user_id: int):
    get_container().users.delete_user(current_identity().user_id, user_id)
    return json_response(message="User deleted successfully")
