# app/models/caretaker.py
"""
Database model for caretakers.
Caretakers form their own identity space: a chat message addressed to a
caretaker carries receiver_type="caretaker" and the caretaker's id.
"""
import uuid
from tortoise import fields, models

class Caretaker(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=128)
    role = fields.CharField(max_length=64, null=True)           # e.g. "Geriatric Nurse"
    status = fields.CharField(max_length=32, default="Available")
    phone = fields.CharField(max_length=32)
    email = fields.CharField(max_length=256, unique=True)
    specialties = fields.JSONField(default=list)
    initials = fields.CharField(max_length=8, null=True)
    rating = fields.FloatField(default=0)
    experience = fields.CharField(max_length=64, null=True)
    photo = fields.CharField(max_length=1024, null=True)

    patients = fields.ManyToManyField(
        "models.User",
        related_name="caretakers",
        through="caretaker_patients",
    )

    class Meta:
        table = "caretakers"
