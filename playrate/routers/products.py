"""Product (game) routes: catalog, play events and reviews."""

from fastapi import APIRouter, BackgroundTasks, Depends, Response

from playrate.auth import require_admin, require_user
from playrate.models.game import GameCreate, GameListResponse, GameUpdate
from playrate.models.review import PlayRequest, PlayResponse, ReviewRequest, ReviewSubmitResponse
from playrate.services import game_service, projection_service
from playrate.services.playtime_service import record_play
from playrate.services.rating_service import schedule_rating_recompute
from playrate.services.review_service import submit_review

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=GameListResponse)
async def list_products(keyword: str | None = None, page_number: int = 1):
    """List games, 10 per page, optionally filtered by name."""
    return await game_service.list_games(keyword=keyword, page=page_number)


@router.post("", status_code=201)
async def create_product(data: GameCreate, admin: dict = Depends(require_admin)):
    """Create a game. Extra body keys are stored as optional fields."""
    return await game_service.create_game(
        owner_id=admin["id"],
        name=data.name,
        image=data.image,
        brand=data.brand,
        category=data.category,
        description=data.description,
        disable_rating=data.disable_rating,
        disable_commenting=data.disable_commenting,
        extra=data.extra_fields(),
    )


# ── Static path routes (must come BEFORE /{game_id} to avoid conflicts) ─────

@router.get("/detailed")
async def list_detailed_products():
    """Every game with total playtime and playtime-sorted reviews."""
    return {"games": await projection_service.list_detailed_games()}


# ── Dynamic path routes (/{game_id}) ────────────────────────────────────────

@router.get("/{game_id}")
async def get_product(game_id: int):
    return await projection_service.get_game_detail(game_id)


@router.put("/{game_id}")
async def update_product(game_id: int, data: GameUpdate, _: dict = Depends(require_admin)):
    return await game_service.update_game(
        game_id,
        extra=data.extra_fields(),
        name=data.name,
        image=data.image,
        brand=data.brand,
        category=data.category,
        description=data.description,
        disable_rating=data.disable_rating,
        disable_commenting=data.disable_commenting,
    )


@router.delete("/{game_id}")
async def delete_product(game_id: int, _: dict = Depends(require_admin)):
    """Delete a game and strip it from every user's playtime."""
    affected_users = await game_service.delete_game(game_id)
    return {
        "message": "Product removed successfully and all associated user data cleaned up",
        "affected_users": affected_users,
    }


@router.get("/{game_id}/comments")
async def get_product_comments(game_id: int):
    return await projection_service.get_game_comments(game_id)


@router.post("/{game_id}/play", response_model=PlayResponse)
async def play_product(
    game_id: int,
    body: PlayRequest,
    background_tasks: BackgroundTasks,
    user: dict = Depends(require_user),
):
    """Record minutes played. The rating is refreshed after the response."""
    total = await record_play(user["id"], game_id, body.time)
    schedule_rating_recompute(background_tasks, game_id)
    return PlayResponse(message="Playtime updated successfully", play_time=total)


@router.post("/{game_id}/reviews", response_model=ReviewSubmitResponse)
async def review_product(
    game_id: int,
    body: ReviewRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    user: dict = Depends(require_user),
):
    """Add or update the caller's rating and/or comment.

    201 when a review was created, 200 when an existing one was updated.
    """
    review, created = await submit_review(
        game_id,
        user["id"],
        rating=body.submitted("rating"),
        comment=body.submitted("comment"),
    )
    schedule_rating_recompute(background_tasks, game_id)
    response.status_code = 201 if created else 200
    return {"message": "Review added" if created else "Review updated", "review": review}
