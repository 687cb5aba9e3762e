# app/core/bootstrap.py
"""
Bootstrap module for application initialization.
Seeds the caretaker directory and the games catalog on first startup.
"""
import json
import logging
from pathlib import Path
from app.config import settings
from app.models.caretaker import Caretaker
from app.models.game import Game

logger = logging.getLogger("uvicorn.error")

def _load_seed(path: str) -> list[dict]:
    return json.loads(Path(path).read_text(encoding="utf-8"))

async def ensure_caretaker_directory(seed_path: str | None = None) -> int:
    """
    If the caretaker table is empty, load it from a JSON seed file.

    The file holds a list of objects with the Caretaker fields (name, phone
    and email required). Only takes effect when:
      - No caretaker exists yet
      - A seed path is given or CARETAKER_SEED_PATH is set

    Returns:
        Number of caretakers created
    """
    if await Caretaker.all().exists():
        return 0

    path = seed_path or settings.caretaker_seed_path
    if not path:
        logger.warning("[bootstrap] Caretaker directory empty and CARETAKER_SEED_PATH not set -> skip seeding.")
        return 0

    created = 0
    for entry in _load_seed(path):
        name = entry["name"]
        await Caretaker.create(
            name=name,
            role=entry.get("role"),
            status=entry.get("status", "Available"),
            phone=entry["phone"],
            email=entry["email"],
            specialties=entry.get("specialties", []),
            initials=entry.get("initials") or "".join(p[0] for p in name.split() if p).upper()[:8],
            rating=entry.get("rating", 0),
            experience=entry.get("experience"),
            photo=entry.get("photo"),
        )
        created += 1
    logger.warning("[bootstrap] Seeded %d caretaker(s) from %s", created, path)
    return created

async def ensure_game_catalog(seed_path: str | None = None) -> int:
    """
    If the games table is empty, load it from a JSON seed file (GAMES_SEED_PATH).

    Each entry needs an "id" slug and a "title".

    Returns:
        Number of games created
    """
    if await Game.all().exists():
        return 0

    path = seed_path or settings.games_seed_path
    if not path:
        logger.warning("[bootstrap] Games catalog empty and GAMES_SEED_PATH not set -> skip seeding.")
        return 0

    created = 0
    for entry in _load_seed(path):
        await Game.create(
            id=str(entry["id"]),
            title=entry["title"],
            description=entry.get("description", ""),
            category=entry.get("category"),
            imageurl=entry.get("imageurl"),
            rating=entry.get("rating", 0),
            duration=entry.get("duration"),
            link=entry.get("link"),
        )
        created += 1
    logger.warning("[bootstrap] Seeded %d game(s) from %s", created, path)
    return created
