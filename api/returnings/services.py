"""
Services for managing returnings
"""
from core.records import RecordStore
from api.returnings.models import Returning, RETURNING_SCHEMA

returnings = RecordStore(
    Returning,
    RETURNING_SCHEMA,
    relations=("borrowing", "user", "book"),
    label="Returning",
)
