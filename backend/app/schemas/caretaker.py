# app/schemas/caretaker.py
"""
Pydantic schemas for the caretaker directory.
"""
from pydantic import BaseModel
from app.schemas.auth import MemberOut

class CaretakerOut(BaseModel):
    id: str
    name: str
    role: str | None = None
    status: str
    phone: str
    email: str
    specialties: list[str] = []
    initials: str | None = None
    rating: float = 0
    experience: str | None = None
    photo: str | None = None
    patients: list[MemberOut] = []

class AssignPatientIn(BaseModel):
    caretakerId: str
    patientId: str
