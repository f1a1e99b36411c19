"""
Error types raised by the record engine.

All of them are HTTPExceptions so that services can raise them directly
and FastAPI turns them into responses without extra handlers.
"""
from fastapi import HTTPException, status


class RecordValidationError(HTTPException):
    """Input failed validation. Carries field level messages."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=errors,
        )

    @classmethod
    def for_field(cls, field: str, message: str) -> "RecordValidationError":
        return cls([{"field": field, "message": message}])


class RecordNotFound(HTTPException):
    """Operation on an identifier that does not exist."""

    def __init__(self, label: str, record_id):
        self.label = label
        self.record_id = record_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} {record_id} not found.",
        )


class FormatError(HTTPException):
    """Import file is not in an accepted tabular format."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[{"field": "file", "message": message}],
        )


class StorageError(HTTPException):
    """The blob backend failed to read, write or delete a file."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )


class StorageInconsistency(HTTPException):
    """Blob store and database rows no longer agree."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )
