"""
Define functions/aliases for dependency injection
"""
from collections.abc import Generator
from functools import lru_cache
from typing import Annotated, TypeAlias
from sqlmodel import Session
from fastapi import Depends

from core.db import get_engine
from core.storage import LocalBlobStore, S3BlobStore, create_blob_store

# Define db dependency
def get_db() -> Generator[Session, None, None]:
  with Session(get_engine()) as session:
    yield session

@lru_cache
def get_blob_store() -> LocalBlobStore | S3BlobStore:
  return create_blob_store()

SessionDep: TypeAlias = Annotated[Session, Depends(get_db)]
BlobStoreDep: TypeAlias = Annotated[LocalBlobStore | S3BlobStore, Depends(get_blob_store)]
