"""
Services for managing borrowings
"""
from core.records import RecordStore
from api.borrowings.models import Borrowing, BORROWING_SCHEMA

borrowings = RecordStore(
    Borrowing, BORROWING_SCHEMA, relations=("user", "book"), label="Borrowing"
)
