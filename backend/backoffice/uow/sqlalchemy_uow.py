"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session, scoped_session

from backoffice.core.extensions import db
from backoffice.repositories import (
    CategoryRepository,
    FoodRepository,
    TenantRepository,
    UserRepository,
)
from backoffice.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session.

    ``categories`` and ``foods`` are unscoped here; services bind them with
    :meth:`~backoffice.repositories.base.TenantScopedRepository.for_tenant`.
    """

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.tenants = TenantRepository(session=self.session)
        self.categories = CategoryRepository(session=self.session)
        self.foods = FoodRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW on the Flask-scoped session.

    Commits when the block exits cleanly, rolls back otherwise.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only UoW: blocks ORM flushes while open and always rolls back on exit.

    ``commit()`` is disallowed.
    """

    read_only = True

    def __init__(self) -> None:
        super().__init__(session=db.session)
        self._guard_installed = False

    def _guard_target(self) -> Session:
        # Listening on a scoped_session would hook every session of its class.
        if isinstance(self.session, scoped_session):
            return self.session()
        return self.session

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._guard = self._guard_target()
        event.listen(self._guard, "before_flush", self._block_flush)
        self._guard_installed = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            if self._guard_installed:
                event.remove(self._guard, "before_flush", self._block_flush)
                self._guard_installed = False

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

    def commit(self) -> None:
        """
        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()
