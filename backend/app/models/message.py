# app/models/message.py
"""
Database model for chat messages.
A message is written once by the dispatcher and never updated or deleted.
Identities are stored in their canonical string form so that history
queries compare like with like regardless of the id type of either side.
"""
from tortoise import fields, models

class Message(models.Model):
    id = fields.IntField(pk=True)  # Auto-increment; breaks ties between equal timestamps
    sender = fields.CharField(max_length=64, index=True)
    receiver = fields.CharField(max_length=64, index=True)
    receiver_type = fields.CharField(max_length=16, default="user")  # "user" or "caretaker"
    content = fields.TextField()
    created_at = fields.DatetimeField(index=True)  # Assigned by MessageStore, never by the client

    class Meta:
        table = "messages"
        ordering = ["created_at", "id"]
