"""Keyed record storage over the local database.

Every record kind is a mapped model class with a string primary key ``id``.
Each write runs in its own session and commits immediately; nothing spans
more than one write.
"""

from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pos_app.database import Base, Database
from pos_app.exceptions import DuplicateKeyError, NotFoundError, StoreUnavailableError

T = TypeVar("T", bound=Base)


def _is_unique_violation(exc: IntegrityError) -> bool:
    msg = str(exc.orig).lower()
    return "unique" in msg or "duplicate" in msg or "primary key" in msg


class Store:
    def __init__(self, database: Database):
        self.database = database

    @contextmanager
    def _session(self):
        db: Session = self.database.session()
        try:
            yield db
        except IntegrityError as e:
            db.rollback()
            if _is_unique_violation(e):
                raise DuplicateKeyError(str(e.orig)) from e
            raise
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreUnavailableError(str(e)) from e
        finally:
            db.close()

    @staticmethod
    def _index_column(kind: type[T], index_name: str):
        column = kind.__table__.c.get(index_name)
        if column is None or not (column.index or column.unique or column.primary_key):
            raise ValueError(f"{kind.__name__} has no index '{index_name}'")
        return getattr(kind, index_name)

    # --- Writes ---

    def add(self, record: T) -> T:
        """Insert a new record. Fails if its id or a unique value is taken."""
        with self._session() as db:
            db.add(record)
            db.commit()
        return record

    def replace(self, record: T) -> T:
        """Insert or overwrite the record stored under the same id."""
        with self._session() as db:
            merged = db.merge(record)
            db.commit()
        return merged

    def delete(self, kind: type[T], record_id: str) -> bool:
        with self._session() as db:
            record = db.get(kind, record_id)
            if record is None:
                return False
            db.delete(record)
            db.commit()
        return True

    def clear(self, kind: type[T]) -> int:
        """Delete every record of a kind. Returns the number removed."""
        with self._session() as db:
            records = list(db.scalars(select(kind)))
            for record in records:
                db.delete(record)
            db.commit()
        return len(records)

    # --- Reads ---

    def get(self, kind: type[T], record_id: str) -> T | None:
        with self._session() as db:
            return db.get(kind, record_id)

    def require(self, kind: type[T], record_id: str) -> T:
        record = self.get(kind, record_id)
        if record is None:
            raise NotFoundError(kind.__name__, record_id)
        return record

    def get_by_index(self, kind: type[T], index_name: str, value) -> T | None:
        column = self._index_column(kind, index_name)
        with self._session() as db:
            return db.scalars(select(kind).where(column == value).limit(1)).first()

    def find_by_index(self, kind: type[T], index_name: str, value) -> list[T]:
        column = self._index_column(kind, index_name)
        with self._session() as db:
            return list(db.scalars(select(kind).where(column == value)))

    def get_all(self, kind: type[T]) -> list[T]:
        with self._session() as db:
            return list(db.scalars(select(kind)))
