from fastapi import APIRouter, HTTPException
from app.core.errors import NotFoundError
from app.models.game import Game
from app.schemas.game import GameOut

router = APIRouter(prefix="/games", tags=["games"])


def _game_to_dict(g: Game) -> dict:
    return {
        "id": g.id,
        "title": g.title,
        "description": g.description,
        "category": g.category,
        "imageurl": g.imageurl,
        "rating": g.rating,
        "duration": g.duration,
        "link": g.link,
    }


@router.get("/all", response_model=list[GameOut])
async def list_games():
    """
    Whole games catalog, ordered by title. Public, no login required.
    """
    return [_game_to_dict(g) for g in await Game.all()]


@router.get("/{game_id}", response_model=GameOut)
async def get_game(game_id: str):
    """
    One game by its slug id.

    Raises:
        HTTPException (404): GAME_NOT_FOUND
    """
    game = await Game.get_or_none(id=game_id)
    if not game:
        err = NotFoundError("Game not found", code="GAME_NOT_FOUND")
        raise HTTPException(status_code=err.status_code, detail=err.to_dict())
    return _game_to_dict(game)
