#!/usr/bin/env python
"""
Delete stored image files that no image row points to.

Orphans are left behind when a replaced or removed image could not be
deleted from the blob store. The script compares the blob store listing
with the image table and removes the difference.

Usage:
    PYTHONPATH=.
    python scripts/sweep_orphaned_images.py --dry-run
    python scripts/sweep_orphaned_images.py
"""
import argparse
import sys

from core.db import get_session
from core.deps import get_blob_store
from core.errors import StorageError
from core.init_db import register_models
from core.logger import logger
from api.images.services import sweep_orphaned_blobs


def main():
    parser = argparse.ArgumentParser(
        description="Delete stored image files that no image row references",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List orphaned files without deleting them",
    )
    args = parser.parse_args()

    register_models()

    # Get database session
    try:
        session = next(get_session())
    except Exception as e:
        logger.error(f"Failed to create database session: {e}")
        sys.exit(1)

    try:
        orphans = sweep_orphaned_blobs(session, get_blob_store(), dry_run=args.dry_run)
    except StorageError as e:
        logger.error(f"Sweep failed: {e.detail}")
        sys.exit(1)
    finally:
        session.close()

    logger.info(
        f"{len(orphans)} orphaned file(s) {'found' if args.dry_run else 'deleted'}"
    )


if __name__ == "__main__":
    main()
