"""
Images module - at most one image per owning record.

Images use a polymorphic association (imageable_type + imageable_id)
so books, authors and users share one table without hard FK constraints.
"""
