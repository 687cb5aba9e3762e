"""
Identity directory

Resolves an identity string in one of the two identity spaces a chat
counterpart can come from:
- "user": member accounts (app.models.User)
- "caretaker": the caretaker directory (app.models.Caretaker)
"""
import uuid
from typing import Any

from app.core.pubsub import normalize_identity
from app.models.caretaker import Caretaker
from app.models.user import User

IDENTITY_MODELS = {
    "user": User,
    "caretaker": Caretaker,
}


def is_well_formed(identity: Any) -> bool:
    try:
        uuid.UUID(str(identity))
    except (TypeError, ValueError):
        return False
    return True


async def identity_exists(identity: Any, kind: str = "user") -> bool:
    """
    Whether `identity` names a stored record of the given kind.

    Unknown kinds and malformed ids resolve to False rather than raising,
    so callers can treat "no such counterpart" as an empty result.
    """
    model = IDENTITY_MODELS.get(kind)
    if model is None:
        return False
    try:
        identity = normalize_identity(identity)
    except ValueError:
        return False
    if not is_well_formed(identity):
        return False
    return await model.filter(id=identity).exists()
