"""
Record Store

Generic create/read/update/delete access for a single SQLModel table.
Every inbound payload is projected through the entity's RecordSchema,
so only the allow-listed fields ever reach the database.
"""
from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, SQLModel, col, func, select

from core.errors import RecordNotFound, RecordValidationError
from core.logger import logger

RecordT = TypeVar("RecordT", bound=SQLModel)


@dataclass(frozen=True)
class SchemaField:
    """One allow-listed field of an entity."""
    name: str
    type: Any
    required: bool = False
    references: Type[SQLModel] | None = None
    aliases: tuple[str, ...] = ()


class RecordSchema:
    """
    Ordered, typed allow-list of the fields a client may set on an entity.

    Builds two pydantic models from the field list: one for create
    (required fields enforced) and one for partial update (everything
    optional). Both ignore unknown keys. Spreadsheet cells holding
    numbers are accepted for text fields.
    """

    def __init__(self, name: str, fields: Sequence[SchemaField]):
        self.name = name
        self.fields = tuple(fields)
        self._keys = {f.name: f.name for f in self.fields}
        for f in self.fields:
            for alias in f.aliases:
                self._keys.setdefault(alias, f.name)
        config = ConfigDict(
            extra="ignore", str_strip_whitespace=True, coerce_numbers_to_str=True
        )
        self._create_model = create_model(
            f"{name}Create",
            __config__=config,
            **{
                f.name: (f.type, ...) if f.required else (f.type | None, None)
                for f in self.fields
            },
        )
        self._update_model = create_model(
            f"{name}Update",
            __config__=config,
            **{f.name: (f.type | None, None) for f in self.fields},
        )

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def references(self) -> list[SchemaField]:
        return [f for f in self.fields if f.references is not None]

    def project(self, payload: Mapping[str, Any], partial: bool = False) -> dict:
        """
        Validate a payload and return only its allow-listed fields.

        With partial=True only the keys present in the payload are returned.
        Keys may use a field's aliases; the field's own name wins when both
        are sent. Raises RecordValidationError listing every failing field.
        """
        cleaned = {}
        for key, value in payload.items():
            name = self._keys.get(key)
            if name is None or (key != name and name in payload):
                continue
            # HTML forms send empty strings for untouched inputs
            cleaned[name] = None if isinstance(value, str) and not value.strip() else value
        model = self._update_model if partial else self._create_model
        try:
            validated: BaseModel = model.model_validate(cleaned)
        except ValidationError as exc:
            raise RecordValidationError(_field_errors(exc)) from exc

        if partial:
            data = validated.model_dump(exclude_unset=True)
            missing = [
                {"field": f.name, "message": "Field required"}
                for f in self.fields
                if f.required and f.name in data and data[f.name] is None
            ]
            if missing:
                raise RecordValidationError(missing)
            return data
        return validated.model_dump(exclude_none=True)


def _field_errors(exc: ValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


@dataclass
class RecordStore(Generic[RecordT]):
    """
    Persistence access for one entity type.

    relations names the relationship attributes that are always
    eager-loaded when records are read.
    """
    model: Type[RecordT]
    schema: RecordSchema
    relations: Sequence[str] = field(default_factory=tuple)
    label: str | None = None

    def __post_init__(self):
        if self.label is None:
            self.label = self.model.__name__

    def eager_options(self) -> list:
        return [selectinload(getattr(self.model, name)) for name in self.relations]

    def select(self, *where):
        """Select statement for this entity with relations eager-loaded."""
        statement = select(self.model).options(*self.eager_options())
        if where:
            statement = statement.where(*where)
        return statement

    def create(self, session: Session, fields: Mapping[str, Any]) -> RecordT:
        data = self.schema.project(fields)
        self._check_references(session, data)
        record = self.model(**data)
        self._save(session, record)
        logger.info("Created %s %s", self.label, record.id)
        return self.get(session, record.id)

    def get(self, session: Session, record_id) -> RecordT:
        record = session.exec(
            self.select(col(self.model.id) == record_id)
        ).first()
        if record is None:
            raise RecordNotFound(self.label, record_id)
        return record

    def update(self, session: Session, record_id, fields: Mapping[str, Any]) -> RecordT:
        record = self.get(session, record_id)
        data = self.schema.project(fields, partial=True)
        self._check_references(session, data)
        for key, value in data.items():
            setattr(record, key, value)
        self._save(session, record)
        logger.info("Updated %s %s (%s)", self.label, record_id, ", ".join(data) or "no changes")
        return self.get(session, record_id)

    def delete(self, session: Session, record_id) -> None:
        record = self.get(session, record_id)
        session.delete(record)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise RecordValidationError.for_field(
                "id", f"{self.label} {record_id} is still referenced by other records."
            ) from exc
        logger.info("Deleted %s %s", self.label, record_id)

    def count(self, session: Session, *where) -> int:
        statement = select(func.count()).select_from(self.model)
        if where:
            statement = statement.where(*where)
        return session.exec(statement).one()

    def all(self, session: Session) -> list[RecordT]:
        """Every record, oldest first."""
        return list(session.exec(
            self.select().order_by(col(self.model.id).asc())
        ).all())

    def _check_references(self, session: Session, data: dict) -> None:
        errors = []
        for ref in self.schema.references:
            value = data.get(ref.name)
            if value is not None and session.get(ref.references, value) is None:
                errors.append({
                    "field": ref.name,
                    "message": f"Selected {ref.name} is invalid.",
                })
        if errors:
            raise RecordValidationError(errors)

    def _save(self, session: Session, record: RecordT) -> None:
        session.add(record)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise RecordValidationError.for_field(
                self.label.lower(), str(exc.orig)
            ) from exc
        session.refresh(record)
