"""
Services for managing categories
"""
from core.records import RecordStore
from api.categories.models import Category, CATEGORY_SCHEMA

categories = RecordStore(Category, CATEGORY_SCHEMA, label="Category")
