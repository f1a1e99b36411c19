"""
Services for managing authors
"""
from core.records import RecordStore
from api.authors.models import Author, AUTHOR_SCHEMA

authors = RecordStore(Author, AUTHOR_SCHEMA, relations=("image",), label="Author")
