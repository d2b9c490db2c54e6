"""
Shared session handling for the database-backed stores
"""
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from storefront import db
from storefront.errors import StorageError


class BaseStore:
    """Wraps a SQLAlchemy session and turns driver failures into StorageError.

    Write methods take ``commit``: when False the change is only flushed,
    so a caller can group several writes into one transaction and call
    ``commit`` itself.
    """

    def __init__(self, session=None):
        self.session = session or db.session

    def _persist(self, operation, commit=True):
        try:
            if commit:
                self.session.commit()
            else:
                self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError.from_sqlalchemy(e, operation) from e

    @contextmanager
    def _reading(self, operation):
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError.from_sqlalchemy(e, operation) from e

    def commit(self, operation='commit'):
        self._persist(operation, commit=True)
