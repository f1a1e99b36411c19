""" Test cases for image attachments """
import pytest
from sqlmodel import Session, select

import api.images.services as image_services
from api.images.models import Image, ImageableType, ImageOwner
from api.images.services import attach, detach, get_image, sweep_orphaned_blobs
from core.errors import RecordValidationError, StorageInconsistency


def test_attach_twice_keeps_one_row(session: Session, blobs, book):
    """ Test that a second attach replaces the first file and row contents """
    owner = ImageOwner.of(book)
    first = attach(session, blobs, owner, b"first", "first.png").filename
    second = attach(session, blobs, owner, b"second", "second.png").filename

    rows = session.exec(select(Image)).all()
    assert len(rows) == 1
    assert rows[0].filename == second
    assert not blobs.exists(first)
    assert blobs.exists(second)


def test_attach_is_scoped_by_kind(session: Session, blobs, book, author):
    """ Test that a book and an author sharing an id get separate images """
    assert book.id == author.id
    attach(session, blobs, ImageOwner.of(book), b"cover", "cover.png")
    attach(session, blobs, ImageOwner.of(author), b"face", "face.png")

    assert len(session.exec(select(Image)).all()) == 2
    assert get_image(session, ImageOwner.of(book)).filename.endswith("_cover.png")
    assert get_image(session, ImageOwner.of(author)).filename.endswith("_face.png")


def test_attach_drops_directory_part_of_filename(session: Session, blobs, book):
    """ Test that client paths cannot escape the storage namespace """
    image = attach(session, blobs, ImageOwner.of(book), b"x", "..\\..\\etc/cover.png")
    assert image.filename.endswith("_cover.png")
    assert "/" not in image.filename
    assert blobs.exists(image.filename)


def test_attach_rejects_non_images(session: Session, blobs, book):
    """ Test that only image extensions are stored """
    with pytest.raises(RecordValidationError):
        attach(session, blobs, ImageOwner.of(book), b"x", "script.sh")
    assert blobs.list_names() == []


def test_attach_recovers_from_concurrent_insert(session: Session, blobs, book, monkeypatch):
    """ Test that losing the insert race turns into an update """
    owner = ImageOwner.of(book)
    existing = attach(session, blobs, owner, b"first", "first.png").filename

    # The lookup misses the row another request just inserted
    real_get_image = image_services.get_image
    calls = []

    def stale_get_image(session, owner):
        calls.append(owner)
        if len(calls) == 1:
            return None
        return real_get_image(session, owner)

    monkeypatch.setattr(image_services, "get_image", stale_get_image)
    image = attach(session, blobs, owner, b"second", "second.png")

    rows = session.exec(select(Image)).all()
    assert len(rows) == 1
    assert rows[0].filename == image.filename
    assert not blobs.exists(existing)


def test_attach_removes_blob_when_row_fails(session: Session, blobs, book, monkeypatch):
    """ Test that a failed row write leaves no stored file behind """
    def broken_upsert(session, owner, filename):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(image_services, "_upsert_image", broken_upsert)
    with pytest.raises(RuntimeError):
        attach(session, blobs, ImageOwner.of(book), b"x", "cover.png")
    assert blobs.list_names() == []


def test_attach_reports_inconsistency_when_cleanup_fails(session: Session, blobs, book, monkeypatch):
    """ Test that a file which cannot be removed is reported """
    def broken_upsert(session, owner, filename):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(image_services, "_upsert_image", broken_upsert)
    blobs.fail_deletes = True
    with pytest.raises(StorageInconsistency):
        attach(session, blobs, ImageOwner.of(book), b"x", "cover.png")
    assert len(blobs.list_names()) == 1


def test_superseded_blob_left_for_sweep(session: Session, blobs, book):
    """ Test that a replace still succeeds when the old file cannot be deleted """
    owner = ImageOwner.of(book)
    first = attach(session, blobs, owner, b"first", "first.png").filename

    blobs.fail_deletes = True
    second = attach(session, blobs, owner, b"second", "second.png").filename
    assert get_image(session, owner).filename == second
    assert blobs.exists(first)

    blobs.fail_deletes = False
    assert sweep_orphaned_blobs(session, blobs, dry_run=True) == [first]
    assert blobs.exists(first)

    assert sweep_orphaned_blobs(session, blobs) == [first]
    assert not blobs.exists(first)
    assert blobs.exists(second)


def test_detach(session: Session, blobs, book):
    """ Test removing an image """
    owner = ImageOwner.of(book)
    filename = attach(session, blobs, owner, b"x", "cover.png").filename

    assert detach(session, blobs, owner) is True
    assert get_image(session, owner) is None
    assert not blobs.exists(filename)
    assert detach(session, blobs, owner) is False


def test_image_owner_from_record(book, author, member):
    """ Test that the owner kind comes from the record type """
    assert ImageOwner.of(book) == ImageOwner(kind=ImageableType.BOOK, id=book.id)
    assert ImageOwner.of(author).kind == ImageableType.AUTHOR
    assert ImageOwner.of(member).kind == ImageableType.USER


def test_owner_locks_are_a_fixed_set():
    """ Test that attaching for many owners never adds locks """
    owners = [
        ImageOwner(kind=kind, id=number)
        for kind in ImageableType
        for number in range(1, 2001)
    ]
    locks = {id(image_services._lock_for(owner)) for owner in owners}

    assert len(image_services._owner_locks) == image_services.OWNER_LOCK_STRIPES
    assert locks <= {id(lock) for lock in image_services._owner_locks}
    owner = ImageOwner(kind=ImageableType.BOOK, id=7)
    assert image_services._lock_for(owner) is image_services._lock_for(
        ImageOwner(kind=ImageableType.BOOK, id=7)
    )
