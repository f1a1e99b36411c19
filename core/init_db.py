"""
Initialize the database: register every table model
and create the tables that do not exist yet.
"""
from core.db import create_db_and_tables
from core.logger import logger


def register_models():
  """
  Import the feature models so their tables land on the metadata
  """
  import api.images.models  # noqa: F401
  import api.authors.models  # noqa: F401
  import api.categories.models  # noqa: F401
  import api.shelves.models  # noqa: F401
  import api.books.models  # noqa: F401
  import api.users.models  # noqa: F401
  import api.borrowings.models  # noqa: F401
  import api.returnings.models  # noqa: F401


def init_db():
  register_models()
  logger.info("Create tables...")
  create_db_and_tables()


if __name__ == "__main__":
  init_db()
