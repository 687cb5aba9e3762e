# app/models/user.py
"""
Database model for users.
Represents a patient/member account: login credentials, display name,
role, gamification profile and preferences. Caretakers live in their own
table (see caretaker.py).
"""
import uuid
from tortoise import fields, models


def default_profile() -> dict:
    return {
        "points": 0,
        "totalLogins": 0,
        "gamesPlayed": 0,
        "chatMessages": 0,
        "achievements": [],
        "activities": [],
    }


class User(models.Model):
    """
    User database model.

    Relationships:
    - Assigned to many Caretakers (reverse side of Caretaker.patients)

    Security:
    - Password is stored as an argon2 hash, never in plain text
    - Email is the login name and must be unique
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=128)
    email = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255, null=True)  # Null for accounts created by an external sign-in
    role = fields.CharField(max_length=16, default="user")
    profile = fields.JSONField(default=default_profile)      # Points, counters, activity log
    settings = fields.JSONField(default=dict)                # Display and notification preferences
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "users"
