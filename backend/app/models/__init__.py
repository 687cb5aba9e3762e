# app/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Member account and authentication model
- Caretaker: Caretaker directory entry with assigned patients
- Message: One persisted chat message
- Game: Entry of the cognitive games catalog
"""
from .user import User
from .caretaker import Caretaker
from .message import Message
from .game import Game
