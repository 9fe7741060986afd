"""User routes: registration, login, profile, projections and admin tools."""

from fastapi import APIRouter, Depends, HTTPException

from playrate.auth import create_access_token, require_admin, require_user
from playrate.models.user import (
    AdminUserUpdate,
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    UserCreate,
    UserResponse,
)
from playrate.services import projection_service, user_service

router = APIRouter(prefix="/api/users", tags=["users"])


def _auth_response(user: dict) -> AuthResponse:
    return AuthResponse(
        id=user["id"],
        name=user["name"],
        email=user["email"],
        is_admin=user["is_admin"],
        token=create_access_token(user["id"]),
    )


@router.post("", response_model=AuthResponse, status_code=201)
async def register(data: UserCreate):
    user = await user_service.create_user(data.name, data.email, data.password)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest):
    """Authenticate with email and password and receive a JWT token."""
    user = await user_service.authenticate(data.email, data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _auth_response(user)


@router.get("", response_model=list[UserResponse])
async def list_users(_: dict = Depends(require_admin)):
    return await user_service.list_users()


# ── Caller's own data ────────────────────────────────────────────────────────

@router.get("/profile", response_model=UserResponse)
async def get_profile(user: dict = Depends(require_user)):
    return await user_service.require_user_record(user["id"])


@router.put("/profile", response_model=AuthResponse)
async def update_profile(data: ProfileUpdate, user: dict = Depends(require_user)):
    updated = await user_service.update_profile(
        user["id"],
        name=data.name,
        email=data.email,
        password=data.password,
    )
    return _auth_response(updated)


@router.get("/stats")
async def get_stats(user: dict = Depends(require_user)):
    return await projection_service.get_user_stats(user["id"])


@router.get("/most-played")
async def get_most_played(user: dict = Depends(require_user)):
    return await projection_service.get_most_played_game(user["id"])


@router.get("/comments")
async def get_comments(user: dict = Depends(require_user)):
    return await projection_service.get_user_comments(user["id"])


@router.get("/dashboard")
async def get_dashboard(user: dict = Depends(require_user)):
    return await projection_service.get_user_dashboard(user["id"])


@router.get("/page")
async def get_page(user: dict = Depends(require_user)):
    return await projection_service.get_user_page(user["id"])


# ── Admin (/{user_id}) ───────────────────────────────────────────────────────

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, data: AdminUserUpdate, _: dict = Depends(require_admin)):
    return await user_service.admin_update_user(
        user_id,
        name=data.name,
        email=data.email,
        is_admin=data.is_admin,
    )


@router.delete("/{user_id}")
async def delete_user(user_id: int, _: dict = Depends(require_admin)):
    """Delete a user, their reviews and playtime; recompute affected ratings."""
    affected_games = await user_service.delete_user(user_id)
    return {
        "message": "User removed successfully and all associated data cleaned up",
        "affected_games": affected_games,
    }
