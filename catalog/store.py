"""
Entity store: one collection per entity kind over a shared SQLAlchemy engine.

Every operation opens and closes its own session, so collections can be used
from worker threads. Returned entities are detached; references are only
available when the query expanded them.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import event, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import load_only, selectinload, sessionmaker

from catalog.data_models import Author, Book, BookInstance, Genre, new_id
from catalog.errors import StoreFailure

log = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Collection:
    """
    Persistence surface for one entity kind.

    ``references`` maps a single-valued reference field (as it appears in
    forms and filters, e.g. ``author``) to its foreign key column.
    ``many`` maps a many-valued reference field (e.g. ``genre``) to the
    referenced model.
    """

    def __init__(self, sessions, model, references=None, many=None):
        self._sessions = sessions
        self.model = model
        self.references = references or {}
        self.many = many or {}

    @contextmanager
    def _session(self):
        try:
            with self._sessions() as session:
                yield session
        except SQLAlchemyError as exc:
            log.error("Store operation on %s failed: %s", self.model.__tablename__, exc)
            raise StoreFailure(f"{self.model.__tablename__}: {exc}") from exc

    def _column(self, field):
        return getattr(self.model, self.references.get(field, field))

    def _criteria(self, where):
        criteria = []
        for field, value in (where or {}).items():
            if field in self.many:
                criteria.append(getattr(self.model, field).any(id=value))
            else:
                criteria.append(self._column(field) == value)
        return criteria

    def _options(self, fields, expand):
        options = [selectinload(getattr(self.model, name)) for name in expand]
        if fields:
            options.append(load_only(*(self._column(field) for field in fields)))
        return options

    def _assign(self, session, entity, values):
        for field, value in values.items():
            if field in self.many:
                target = self.many[field]
                ids = list(value or [])
                value = list(session.scalars(select(target).where(target.id.in_(ids)))) if ids else []
                setattr(entity, field, value)
            else:
                setattr(entity, self.references.get(field, field), value)

    def _get(self, session, entity_id, options):
        if entity_id is None:
            return None
        return session.get(self.model, entity_id, options=options)

    def find(self, where=None, fields=None, expand=(), sort=None):
        """
        Return every entity matching ``where``.

        Args:
            where (dict): field -> value; a many-valued field matches by membership.
            fields (iterable): project to these fields (the id is always loaded).
            expand (iterable): reference fields to load with the full entity.
            sort (str): field to order by; the id always breaks ties.
        """
        order = [self._column(sort)] if sort else []
        stmt = (
            select(self.model)
            .where(*self._criteria(where))
            .options(*self._options(fields, expand))
            .order_by(*order, self.model.id)
        )
        with self._session() as session:
            return list(session.scalars(stmt))

    def find_by_id(self, entity_id, expand=()):
        """Return the entity with this id, or None."""
        with self._session() as session:
            return self._get(session, entity_id, self._options(None, expand))

    def count(self, where=None) -> int:
        stmt = select(func.count()).select_from(self.model).where(*self._criteria(where))
        with self._session() as session:
            return session.scalar(stmt)

    def save(self, values):
        """Create a new entity from ``values`` and return it with its new id."""
        with self._session() as session:
            entity = self.model(id=new_id())
            self._assign(session, entity, values)
            session.add(entity)
            session.commit()
            return entity

    def update_by_id(self, entity_id, values):
        """Replace the fields in ``values`` on an existing entity; None if it is gone."""
        with self._session() as session:
            entity = self._get(session, entity_id, self._options(None, self.many))
            if entity is None:
                return None
            self._assign(session, entity, values)
            session.commit()
            return entity

    def delete_by_id(self, entity_id) -> bool:
        """Delete the entity with this id. A missing id is not an error."""
        with self._session() as session:
            entity = self._get(session, entity_id, self._options(None, self.many))
            if entity is None:
                return False
            session.delete(entity)
            session.commit()
            return True


class Store:
    """
    The four entity collections, sharing one engine.
    """

    def __init__(self, engine):
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        sessions = sessionmaker(bind=engine, expire_on_commit=False)

        self.authors = Collection(sessions, Author)
        self.books = Collection(sessions, Book, references={"author": "author_id"}, many={"genre": Genre})
        self.genres = Collection(sessions, Genre)
        self.instances = Collection(sessions, BookInstance, references={"book": "book_id"})
