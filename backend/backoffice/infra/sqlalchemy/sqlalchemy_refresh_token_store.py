# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from backoffice.models.refresh_token import RefreshToken as RefreshTokenRow
from backoffice.services._shared.ports import RefreshRecord, RefreshTokenStore, as_utc


class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store on the ``refresh_tokens`` table.

    Every call runs in its own short transaction on the session returned by
    ``session_factory`` and commits before returning, so the token state is
    durable before the caller hands anything to a client.

    :param session_factory: Zero-arg callable returning the session to use
        (the Flask-scoped ``db.session`` in the app).
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @property
    def session(self) -> Session:
        return self._session_factory()

    @staticmethod
    def _record(row: RefreshTokenRow) -> RefreshRecord:
        # SQLite hands back naive datetimes even for timezone-aware columns.
        return RefreshRecord(user_id=row.user_id, token=row.token, expires_at=as_utc(row.expires_at))

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # -------------------- API ------------------------

    def upsert(self, user_id: str, token: str, expires_at: datetime) -> None:
        session = self.session
        expires_at = as_utc(expires_at)
        dialect = session.get_bind().dialect.name
        values = {"user_id": user_id, "token": token, "expires_at": expires_at}

        if dialect in ("postgresql", "sqlite"):
            insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
            stmt = insert(RefreshTokenRow).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[RefreshTokenRow.user_id],
                set_={"token": stmt.excluded.token, "expires_at": stmt.excluded.expires_at},
            )
            session.execute(stmt)
        else:
            row = session.execute(
                select(RefreshTokenRow).where(RefreshTokenRow.user_id == user_id)
            ).scalar_one_or_none()
            if row is None:
                session.add(RefreshTokenRow(**values))
            else:
                row.token = token
                row.expires_at = expires_at
        self._commit()

    def find_by_token(self, token: str) -> RefreshRecord | None:
        row = self.session.execute(
            select(RefreshTokenRow).where(RefreshTokenRow.token == token)
        ).scalar_one_or_none()
        return self._record(row) if row is not None else None

    def delete_by_token(self, token: str) -> int:
        result = self.session.execute(delete(RefreshTokenRow).where(RefreshTokenRow.token == token))
        self._commit()
        return int(result.rowcount or 0)

    def delete_for_user(self, user_id: str) -> int:
        result = self.session.execute(
            delete(RefreshTokenRow).where(RefreshTokenRow.user_id == user_id)
        )
        self._commit()
        return int(result.rowcount or 0)

    def rotate(self, user_id: str, old_token: str, new_token: str, expires_at: datetime) -> bool:
        """
        Conditional ``UPDATE ... WHERE user_id = :uid AND token = :old``.

        The database serializes concurrent updates of the same row, so only
        one caller observes ``rowcount == 1``.
        """
        result = self.session.execute(
            update(RefreshTokenRow)
            .where(RefreshTokenRow.user_id == user_id, RefreshTokenRow.token == old_token)
            .values(token=new_token, expires_at=as_utc(expires_at))
        )
        self._commit()
        return int(result.rowcount or 0) == 1

    def purge_expired(self, now: datetime) -> int:
        result = self.session.execute(
            delete(RefreshTokenRow).where(RefreshTokenRow.expires_at < as_utc(now))
        )
        self._commit()
        return int(result.rowcount or 0)
