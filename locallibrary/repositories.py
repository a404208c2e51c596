"""Per-entity data access.

Each repository wraps the SQLAlchemy session for one model and exposes the
small set of operations the request handlers need. Repositories are built
once by the application factory and passed to the views.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from .models import Author, Book, BookInstance, Genre

log = logging.getLogger(__name__)


class Repository:
    model = None

    def __init__(self, db):
        self.db = db

    @property
    def session(self):
        return self.db.session

    def _select(self, order_by=None, **criteria):
        stmt = select(self.model).filter_by(**criteria)
        if order_by is not None:
            if not isinstance(order_by, (list, tuple)):
                order_by = [order_by]
            stmt = stmt.order_by(*order_by)
        return stmt

    def find(self, order_by=None, **criteria) -> List[Any]:
        return list(self.session.execute(self._select(order_by, **criteria)).scalars())

    def find_one(self, **criteria) -> Optional[Any]:
        return self.session.execute(self._select(**criteria).limit(1)).scalars().first()

    def find_by_id(self, record_id) -> Optional[Any]:
        if record_id is None:
            return None
        return self.session.get(self.model, record_id)

    def count(self, **criteria) -> int:
        stmt = select(func.count()).select_from(self.model).filter_by(**criteria)
        return self.session.execute(stmt).scalar_one()

    def create(self, record):
        self.session.add(record)
        self.session.commit()
        log.info("created %r", record)
        return record

    def update_by_id(self, record_id, values: Dict[str, Any]) -> Optional[Any]:
        record = self.find_by_id(record_id)
        if record is None:
            return None
        for key, value in values.items():
            setattr(record, key, value)
        self.session.commit()
        log.info("updated %r", record)
        return record

    def delete_by_id(self, record_id) -> Optional[Any]:
        record = self.find_by_id(record_id)
        if record is None:
            return None
        self.session.delete(record)
        self.session.commit()
        log.info("deleted %s %s", self.model.__name__, record_id)
        return record


class GenreRepository(Repository):
    model = Genre


class AuthorRepository(Repository):
    model = Author


class BookRepository(Repository):
    model = Book


class BookInstanceRepository(Repository):
    model = BookInstance


@dataclass
class Repositories:
    genres: GenreRepository
    authors: AuthorRepository
    books: BookRepository
    book_instances: BookInstanceRepository

    @classmethod
    def from_db(cls, db):
        return cls(
            genres=GenreRepository(db),
            authors=AuthorRepository(db),
            books=BookRepository(db),
            book_instances=BookInstanceRepository(db),
        )
