"""Repository base.

A repository is the only code that talks to the database for one entity.
Single-record reads and writes return full structs; collection reads return
summaries. ORM instances never leave this module's subclasses.

Write failures are split in two:
- anticipated ones (unique/foreign key violations, record validation) roll
  back and come back as an absent value, or as a WriteResult carrying the
  message when the ``try_*`` variant is used;
- anything else from SQLAlchemy rolls back and raises StorageFailure.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger
from sqlalchemy import Select, delete, func, inspect, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from race_logger.broadcasting import Broadcaster, DeletedRecord
from race_logger.core.errors import ConstructionError, NotFoundError, RecordInvalidError, StorageFailure
from race_logger.db.models import Base
from race_logger.db.struct import Struct, Summary

StructT = TypeVar("StructT", bound=Struct)
SummaryT = TypeVar("SummaryT", bound=Summary)


@dataclass(frozen=True)
class WriteResult(Generic[StructT]):
    """Outcome of a ``try_*`` write: the struct, or why there is none."""

    value: StructT | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _describe(error: Exception) -> str:
    if isinstance(error, IntegrityError):
        return str(error.orig) if error.orig is not None else str(error)
    return str(error)


class Repo(Generic[StructT, SummaryT]):
    """Base repository.

    Subclasses set ``record_class``, ``struct_class`` and ``summary_class``
    and list their own custom finders in ``returns_one`` / ``returns_many``.
    The declarations accumulate down the class hierarchy into
    ``one_methods`` / ``many_methods``.
    """

    record_class: ClassVar[type[Base]]
    struct_class: ClassVar[type[Struct]]
    summary_class: ClassVar[type[Summary]]

    returns_one: ClassVar[tuple[str, ...]] = ("find", "find_or_raise", "find_by", "first", "last", "create", "update")
    returns_many: ClassVar[tuple[str, ...]] = ("all", "where", "many")

    one_methods: ClassVar[frozenset[str]] = frozenset(returns_one)
    many_methods: ClassVar[frozenset[str]] = frozenset(returns_many)

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls.one_methods = cls.one_methods | frozenset(cls.__dict__.get("returns_one", ()))
        cls.many_methods = cls.many_methods | frozenset(cls.__dict__.get("returns_many", ()))

    def __init__(self, session: Session, broadcaster: Broadcaster | None = None):
        self.session = session
        self.broadcaster = broadcaster

    # ------------------------------------------------------------------
    # Scope and row conversion
    # ------------------------------------------------------------------

    def base_scope(self) -> Select:
        """Default query for every read. Extra labelled columns become struct fields."""
        return select(self.record_class).order_by(self.record_class.id)

    @classmethod
    def column_names(cls) -> tuple[str, ...]:
        return tuple(attr.key for attr in inspect(cls.record_class).column_attrs)

    def _column(self, name: str) -> Any:
        if name not in self.column_names():
            raise AttributeError(f"{self.record_class.__name__} has no column '{name}'")
        return getattr(self.record_class, name)

    def _criteria(self, criteria: Mapping[str, Any]) -> list[Any]:
        clauses = []
        for name, value in criteria.items():
            column = self._column(name)
            if value is None:
                clauses.append(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            else:
                clauses.append(column == value)
        return clauses

    def _row_attributes(self, row: Row) -> dict[str, Any]:
        record = row[0]
        attributes = {name: getattr(record, name) for name in self.column_names()}
        attributes.update(zip(row._fields[1:], row[1:]))
        return attributes

    def _build(self, target: type[Struct] | type[Summary], attributes: Mapping[str, Any]) -> Any:
        try:
            if issubclass(target, Summary):
                return target.build({name: attributes.get(name) for name in target.fields()})
            return target.build({name: attributes[name] for name in target.field_names() if name in attributes})
        except ConstructionError as e:
            logger.error(f"Could not build {target.__name__} from {self.record_class.__name__} row: {e}")
            raise

    def _one(self, stmt: Select) -> StructT | None:
        row = self.session.execute(stmt.limit(1).execution_options(populate_existing=True)).first()
        if row is None:
            return None
        return self._build(self.struct_class, self._row_attributes(row))

    def _many(self, stmt: Select) -> list[SummaryT]:
        rows = self.session.execute(stmt.execution_options(populate_existing=True))
        return [self._build(self.summary_class, self._row_attributes(row)) for row in rows]

    # ------------------------------------------------------------------
    # Single-record reads
    # ------------------------------------------------------------------

    def find(self, id: int) -> StructT | None:
        return self._one(self.base_scope().where(self.record_class.id == id))

    def find_or_raise(self, id: int) -> StructT:
        found = self.find(id)
        if found is None:
            raise NotFoundError(self.record_class.__name__, id)
        return found

    def find_by(self, **criteria: Any) -> StructT | None:
        return self._one(self.base_scope().where(*self._criteria(criteria)))

    def first(self) -> StructT | None:
        return self._one(self.base_scope().order_by(None).order_by(self.record_class.id.asc()))

    def last(self) -> StructT | None:
        return self._one(self.base_scope().order_by(None).order_by(self.record_class.id.desc()))

    # ------------------------------------------------------------------
    # Collection reads
    # ------------------------------------------------------------------

    def all(self) -> list[SummaryT]:
        return self._many(self.base_scope())

    def where(self, **criteria: Any) -> list[SummaryT]:
        return self._many(self.base_scope().where(*self._criteria(criteria)))

    def many(self, ids: Iterable[int]) -> list[SummaryT]:
        ids = list(ids)
        if not ids:
            return []
        return self._many(self.base_scope().where(self.record_class.id.in_(ids)))

    # ------------------------------------------------------------------
    # Aggregates: query the record table directly, without base_scope()
    # joins or ordering, and build no structs
    # ------------------------------------------------------------------

    def count(self, **criteria: Any) -> int:
        stmt = select(func.count()).select_from(self.record_class).where(*self._criteria(criteria))
        return int(self.session.scalar(stmt) or 0)

    def exists(self, **criteria: Any) -> bool:
        stmt = select(self.record_class.id).where(*self._criteria(criteria)).limit(1)
        return self.session.scalar(stmt) is not None

    def pluck(self, *fields: str, **criteria: Any) -> list[Any]:
        """Raw column values; one field gives a flat list, several give tuples."""
        if not fields:
            raise ValueError("pluck() needs at least one field")
        columns = [self._column(name) for name in fields]
        stmt = select(*columns).where(*self._criteria(criteria)).order_by(self.record_class.id)
        rows = self.session.execute(stmt).all()
        if len(fields) == 1:
            return [row[0] for row in rows]
        return [tuple(row) for row in rows]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def prepare_attributes(self, attributes: Mapping[str, Any]) -> dict[str, Any]:
        """Hook for translating caller attributes into column values."""
        return dict(attributes)

    def _rejected(self, operation: str, error: Exception) -> WriteResult[StructT]:
        self.session.rollback()
        message = _describe(error)
        logger.warning(f"{self.record_class.__name__} {operation} rejected: {message}")
        return WriteResult(error=message)

    def _storage_failure(self, operation: str, error: SQLAlchemyError) -> StorageFailure:
        self.session.rollback()
        logger.error(f"{self.record_class.__name__} {operation} failed: {error}")
        return StorageFailure(f"{self.record_class.__name__}.{operation}", error)

    def _assign(self, record: Base, values: Mapping[str, Any]) -> None:
        columns = self.column_names()
        for name, value in values.items():
            if name not in columns or name == "id":
                raise RecordInvalidError(self.record_class.__name__, name, "is not a writable attribute")
            setattr(record, name, value)

    def try_create(self, attributes: Mapping[str, Any]) -> WriteResult[StructT]:
        try:
            record = self.record_class()
            self._assign(record, self.prepare_attributes(attributes))
            self.session.add(record)
            self.session.commit()
        except (IntegrityError, RecordInvalidError) as e:
            return self._rejected("create", e)
        except SQLAlchemyError as e:
            raise self._storage_failure("create", e) from e

        created = self.find_or_raise(record.id)
        logger.debug(f"{self.record_class.__name__} {record.id} created")
        self._broadcast("created", created)
        return WriteResult(value=created)

    def try_update(self, id: int, attributes: Mapping[str, Any]) -> WriteResult[StructT]:
        record = self.session.get(self.record_class, id)
        if record is None:
            return WriteResult(error=f"{self.record_class.__name__} {id} not found")
        try:
            self._assign(record, self.prepare_attributes(attributes))
            self.session.commit()
        except (IntegrityError, RecordInvalidError) as e:
            return self._rejected("update", e)
        except SQLAlchemyError as e:
            raise self._storage_failure("update", e) from e

        updated = self.find_or_raise(id)
        logger.debug(f"{self.record_class.__name__} {id} updated")
        self._broadcast("updated", updated)
        return WriteResult(value=updated)

    def try_delete(self, id: int) -> WriteResult[bool]:
        try:
            deleted = self.session.execute(delete(self.record_class).where(self.record_class.id == id)).rowcount
            self.session.commit()
        except IntegrityError as e:
            return self._rejected("delete", e)  # type: ignore[return-value]
        except SQLAlchemyError as e:
            raise self._storage_failure("delete", e) from e

        if not deleted:
            return WriteResult(value=False, error=f"{self.record_class.__name__} {id} not found")
        logger.debug(f"{self.record_class.__name__} {id} deleted")
        self._broadcast("deleted", DeletedRecord(self.struct_class, id))
        return WriteResult(value=True)

    def create(self, attributes: Mapping[str, Any]) -> StructT | None:
        return self.try_create(attributes).value

    def update(self, id: int, attributes: Mapping[str, Any]) -> StructT | None:
        return self.try_update(id, attributes).value

    def delete(self, id: int) -> bool | None:
        """True when deleted, False when absent, None when the database refused."""
        return self.try_delete(id).value

    # ------------------------------------------------------------------
    # Bulk helpers for subclasses
    # ------------------------------------------------------------------

    def _reorder(self, parent_column: str, parent_id: int, orders: Mapping[int, int]) -> bool:
        """Set display_order for several rows of one parent in a single commit.

        Any id that does not belong to the parent rolls the whole batch back;
        an order that is not an integer aborts before anything is written.
        """
        parent = self._column(parent_column)
        try:
            converted = {record_id: int(display_order) for record_id, display_order in orders.items()}
        except (TypeError, ValueError) as e:
            logger.warning(f"{self.record_class.__name__} reorder aborted: {e}")
            return False

        try:
            for record_id, display_order in converted.items():
                result = self.session.execute(
                    update(self.record_class)
                    .where(self.record_class.id == record_id, parent == parent_id)
                    .values(display_order=display_order)
                )
                if result.rowcount != 1:
                    self.session.rollback()
                    logger.warning(
                        f"{self.record_class.__name__} reorder aborted: id {record_id} not under {parent_column}={parent_id}"
                    )
                    return False
            self.session.commit()
        except IntegrityError as e:
            self._rejected("reorder", e)
            return False
        except SQLAlchemyError as e:
            raise self._storage_failure("reorder", e) from e

        for record_id in orders:
            reordered = self.find(record_id)
            if reordered is not None:
                self._broadcast("updated", reordered)
        return True

    def _insert_all(self, rows: Sequence[Mapping[str, Any]]) -> list[StructT] | None:
        """Insert several rows in one transaction; None (and nothing written) on rejection."""
        records = []
        try:
            for attributes in rows:
                record = self.record_class()
                self._assign(record, self.prepare_attributes(attributes))
                self.session.add(record)
                records.append(record)
            self.session.commit()
        except (IntegrityError, RecordInvalidError) as e:
            self._rejected("bulk insert", e)
            return None
        except SQLAlchemyError as e:
            raise self._storage_failure("bulk insert", e) from e

        created = [self.find_or_raise(record.id) for record in records]
        for struct in created:
            self._broadcast("created", struct)
        return created

    def _broadcast(self, action: str, payload: Any) -> None:
        if self.broadcaster is not None:
            self.broadcaster.broadcast(action, payload)  # type: ignore[arg-type]
