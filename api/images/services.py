"""
Services for image attachments.

An owner has at most one image. Attaching again replaces the stored
file and updates the existing row in place.

Order of operations for attach:
  1. write the new blob
  2. insert or update the row (per-owner lock + unique constraint)
  3. delete the superseded blob
A failure in 2 removes the new blob again. A failure in 3 leaves an
orphaned blob that sweep_orphaned_blobs() collects later.
"""

import threading
import uuid
from datetime import datetime, timezone
from pathlib import PurePath

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.crud import RecordHooks
from core.errors import RecordValidationError, StorageError, StorageInconsistency
from core.logger import logger
from core.utils import Payload
from api.images.models import Image, ImageableType, ImageOwner

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "bmp", "svg"}

# Owners share a fixed set of locks, picked by hash
OWNER_LOCK_STRIPES = 64
_owner_locks = tuple(threading.Lock() for _ in range(OWNER_LOCK_STRIPES))


def _lock_for(owner: ImageOwner) -> threading.Lock:
    return _owner_locks[hash((owner.kind.value, owner.id)) % len(_owner_locks)]


def stored_filename(original_filename: str) -> str:
    """
    Unique name for a stored file: <token>_<client filename>.
    Any directory part of the client filename is dropped.
    """
    base = PurePath(original_filename.replace("\\", "/")).name or "upload"
    return f"{uuid.uuid4().hex}_{base}"


def validate_image_filename(original_filename: str | None, field: str = "image") -> str:
    if not original_filename:
        raise RecordValidationError.for_field(field, "An image file is required.")
    extension = PurePath(original_filename).suffix.lower().lstrip(".")
    if extension not in IMAGE_EXTENSIONS:
        raise RecordValidationError.for_field(
            field,
            f"The {field} must be a file of type: {', '.join(sorted(IMAGE_EXTENSIONS))}.",
        )
    return original_filename


def get_image(session: Session, owner: ImageOwner) -> Image | None:
    """The owner's image row, looked up by kind and id together."""
    return session.exec(
        select(Image).where(
            Image.imageable_type == owner.kind,
            Image.imageable_id == owner.id,
        )
    ).first()


def attach(
    session: Session,
    blobs,
    owner: ImageOwner,
    data: bytes,
    original_filename: str,
) -> Image:
    """
    Store an image for owner, replacing any previous one.
    """
    validate_image_filename(original_filename)
    filename = stored_filename(original_filename)

    blobs.write(filename, data)

    with _lock_for(owner):
        try:
            image, superseded = _upsert_image(session, owner, filename)
        except Exception as exc:
            session.rollback()
            _remove_unreferenced(blobs, filename, exc)
            raise

    if superseded:
        try:
            blobs.delete(superseded)
        except StorageError as exc:
            # Row already points at the new file, the old one is only an orphan
            logger.error(
                "Storage inconsistency: superseded image %s of %s %s was not deleted: %s",
                superseded, owner.kind.value, owner.id, exc.detail,
            )

    logger.info(
        "%s image %s for %s %s",
        "Replaced" if superseded else "Stored",
        filename, owner.kind.value, owner.id,
    )
    return image


def _upsert_image(session: Session, owner: ImageOwner, filename: str) -> tuple[Image, str | None]:
    """
    Point the owner's image row at filename.
    Returns the row and the filename it replaced, if any.
    """
    image = get_image(session, owner)
    if image is None:
        image = Image(
            filename=filename,
            imageable_type=owner.kind,
            imageable_id=owner.id,
        )
        session.add(image)
        try:
            session.commit()
        except IntegrityError:
            # Another process inserted the row between lookup and insert
            session.rollback()
            image = get_image(session, owner)
            if image is None:
                raise
        else:
            session.refresh(image)
            return image, None

    superseded = image.filename
    image.filename = filename
    image.updated_at = datetime.now(timezone.utc)
    session.add(image)
    session.commit()
    session.refresh(image)
    return image, superseded


def _remove_unreferenced(blobs, filename: str, cause: Exception) -> None:
    """Undo a blob write whose row could not be saved."""
    try:
        blobs.delete(filename)
    except StorageError as exc:
        logger.error(
            "Storage inconsistency: image %s was stored but its row was not saved (%s), "
            "and removing the file failed: %s",
            filename, cause, exc.detail,
        )
        raise StorageInconsistency(
            f"Image {filename} was stored without a database record."
        ) from cause


def detach(session: Session, blobs, owner: ImageOwner) -> bool:
    """
    Delete the owner's image row and file.
    Returns False when the owner had no image.
    """
    image = get_image(session, owner)
    if image is None:
        return False

    filename = image.filename
    session.delete(image)
    session.commit()

    try:
        blobs.delete(filename)
    except StorageError as exc:
        logger.error(
            "Storage inconsistency: image %s of %s %s was unlinked but not deleted: %s",
            filename, owner.kind.value, owner.id, exc.detail,
        )
    logger.info("Removed image %s from %s %s", filename, owner.kind.value, owner.id)
    return True


def sweep_orphaned_blobs(session: Session, blobs, dry_run: bool = False) -> list[str]:
    """
    Delete stored files that no image row references.
    Returns the names of the orphaned files.
    """
    referenced = set(session.exec(select(Image.filename)).all())
    orphans = [name for name in blobs.list_names() if name not in referenced]
    for name in orphans:
        if dry_run:
            logger.info("Orphaned image %s (dry run, kept)", name)
            continue
        blobs.delete(name)
        logger.info("Deleted orphaned image %s", name)
    return orphans


def attach_upload(session: Session, blobs, record, upload) -> Image:
    """Attach an uploaded file (starlette UploadFile) to record."""
    return attach(
        session,
        blobs,
        ImageOwner.of(record),
        upload.file.read(),
        upload.filename,
    )


class ImageHooks(RecordHooks):
    """
    Optional image upload on create/update, image removal on delete.
    """

    def __init__(self, kind: ImageableType, field: str = "image"):
        self.kind = kind
        self.field = field

    def validate(self, payload: Payload) -> None:
        upload = payload.file(self.field)
        if upload is not None:
            validate_image_filename(upload.filename, self.field)

    def after_save(self, session: Session, blobs, record, payload: Payload) -> None:
        upload = payload.file(self.field)
        if upload is not None:
            attach_upload(session, blobs, record, upload)

    def after_delete(self, session: Session, blobs, record_id) -> None:
        detach(session, blobs, ImageOwner(kind=self.kind, id=record_id))
