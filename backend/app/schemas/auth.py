# app/schemas/auth.py
"""
Pydantic schemas for account endpoints: credentials, profile and settings.
"""
from typing import Optional
from pydantic import BaseModel

class RegisterIn(BaseModel):
    name: str
    email: str
    password: str

class LoginRequest(BaseModel):
    email: str
    password: str

class ChangePasswordIn(BaseModel):
    currentPassword: str
    newPassword: str

class ChangeNameIn(BaseModel):
    newName: str

class MemberOut(BaseModel):
    """
    Public view of a member: chat contact list and caretaker patient lists.
    """
    id: str
    name: str
    email: str

class UserOut(MemberOut):
    """
    Account information returned to the account owner. Never includes the password hash.
    """
    role: str = "user"

class ActivityOut(BaseModel):
    type: str
    title: str
    time: str
    points: int = 0

class ProfileOut(BaseModel):
    """
    Gamification profile. Counters and the activity log are written by the
    server (e.g. +2 points per login); clients only read them.
    """
    points: int = 0
    totalLogins: int = 0
    gamesPlayed: int = 0
    chatMessages: int = 0
    achievements: list[str] = []
    activities: list[ActivityOut] = []

class ProfileUpdateIn(BaseModel):
    achievements: Optional[list[str]] = None

class AccessibilitySettings(BaseModel):
    largeText: bool = False

class NotificationSettings(BaseModel):
    email: bool = True
    sms: bool = False
    push: bool = False

class UserSettings(BaseModel):
    """
    Display and notification preferences. PUT replaces the whole document;
    omitted sections fall back to these defaults.
    """
    theme: str = "light"
    color: str = "blue"
    font: str = "default"
    accessibility: AccessibilitySettings = AccessibilitySettings()
    notifications: NotificationSettings = NotificationSettings()
