"""
Database configuration
"""
from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session
from core.config import get_settings

# Create engine lazily to allow test configuration to be applied
_engine = None

def enable_sqlite_foreign_keys(engine):
    """
    SQLite ignores foreign keys unless asked per connection.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine

def get_engine():
    """
    Get or create the database engine.
    This lazy initialization allows test settings to be applied properly.
    """
    global _engine
    if _engine is None:
        uri = str(get_settings().SQLALCHEMY_DATABASE_URI)
        connect_args = {"check_same_thread": False} if uri.startswith("sqlite") else {}
        _engine = enable_sqlite_foreign_keys(
            create_engine(uri, echo=False, connect_args=connect_args)
        )
    return _engine

def reset_engine():
    """
    Reset the engine to None.
    This is useful for tests that need to switch between different settings.
    """
    global _engine
    _engine = None

def create_db_and_tables():
    """
    Create all tables registered on the SQLModel metadata.
    Feature models must be imported before this is called.
    """
    SQLModel.metadata.create_all(get_engine())

# Yield session
def get_session():
    with Session(get_engine()) as session:
        yield session
