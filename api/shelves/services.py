"""
Services for managing shelves
"""
from core.records import RecordStore
from api.shelves.models import Shelf, SHELF_SCHEMA

shelves = RecordStore(Shelf, SHELF_SCHEMA, label="Shelf")
