# app/models/game.py
"""
Database model for the cognitive games catalog.
Games are addressed by a stable slug id (e.g. "memory-match") that the
frontend uses in its routes.
"""
from tortoise import fields, models

class Game(models.Model):
    id = fields.CharField(pk=True, max_length=64)
    title = fields.CharField(max_length=128)
    description = fields.TextField(default="")
    category = fields.CharField(max_length=64, null=True)
    imageurl = fields.CharField(max_length=1024, null=True)
    rating = fields.FloatField(default=0)
    duration = fields.CharField(max_length=32, null=True)   # e.g. "5 min"
    link = fields.CharField(max_length=1024, null=True)     # Where the playable game is hosted

    class Meta:
        table = "games"
        ordering = ["title"]
