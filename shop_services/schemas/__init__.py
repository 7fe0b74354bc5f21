"""
Pydantic schema definitions for API payloads.

Each service defines its own request and response models.  Schemas are
kept separate from the database layer so the wire representation of a
service can evolve independently of its storage.
"""
