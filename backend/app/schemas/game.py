# app/schemas/game.py
"""
Pydantic schemas for the games catalog.
"""
from pydantic import BaseModel

class GameOut(BaseModel):
    id: str
    title: str
    description: str = ""
    category: str | None = None
    imageurl: str | None = None
    rating: float = 0
    duration: str | None = None
    link: str | None = None
