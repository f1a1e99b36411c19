"""
Search/Query Builder

Turns a free-text search term into a single SQL predicate over an
entity's own columns and over one column of each related entity.
"""
from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy import or_, true
from sqlalchemy.orm import InstrumentedAttribute

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class SearchSpec:
    """
    Where a search term is looked for.

    fields:  columns of the entity itself, e.g. (Book.title, Book.isbn)
    related: (relationship, column on the related entity) pairs,
             e.g. ((Book.author, Author.name),)
    """
    fields: Sequence[InstrumentedAttribute] = field(default_factory=tuple)
    related: Sequence[tuple[InstrumentedAttribute, InstrumentedAttribute]] = field(
        default_factory=tuple
    )


def escape_like(term: str) -> str:
    """Make %, _ and the escape character match literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def build_search_predicate(search_query: str | None, spec: SearchSpec | None):
    """
    Build the filter for a search term.

    An empty term (or an entity without a search spec) matches every
    record. Otherwise a record matches when any direct field or any
    related entity's field contains the term, ignoring case.
    """
    term = (search_query or "").strip()
    if not term or spec is None:
        return true()

    pattern = f"%{escape_like(term)}%"
    clauses = [column.ilike(pattern, escape=LIKE_ESCAPE) for column in spec.fields]
    clauses.extend(
        relationship.has(column.ilike(pattern, escape=LIKE_ESCAPE))
        for relationship, column in spec.related
    )
    if not clauses:
        return true()
    return or_(*clauses)
