"""Generic repository base and query utilities for SQLAlchemy 2.x.

Persistence-only concerns shared by all repositories:

- Typed pagination input/output (:class:`Pagination`, :class:`Page`).
- Whitelisted sorting with a primary-key tiebreaker.
- Case-insensitive search over a whitelist of text columns.
- Tenant scoping for aggregates that carry a ``tenant_id`` column.

Repositories never commit or roll back; services own the Unit of Work.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from backoffice.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ------------------------------- Pagination ----------------------------------


@dataclass(slots=True)
class Pagination:
    """Pagination input parameters.

    :param page: 1-based page number.
    :param limit: Page size.
    :param sort: Public sort tokens (e.g., ``["-created_at", "name"]``).
    :param search: Optional free-text term matched against searchable columns.
    """

    page: int
    limit: int
    sort: list[str]
    search: str | None = None


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata."""

    items: Sequence[E]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def _apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply ``ORDER BY`` clauses from a whitelist mapping.

    Unknown tokens are ignored. The primary key is always appended as an
    ascending tiebreaker so pages are deterministic.
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())
    if orders:
        stmt = stmt.order_by(*orders)
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
    with_total: bool = True,
) -> tuple[list[Any], int]:
    """Execute ``stmt`` for one page and optionally count the full result.

    :returns: ``(items, total)``; ``total`` is ``0`` when ``with_total=False``.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    total = 0
    if with_total:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(limit).offset((page - 1) * limit)
    items = list(session.execute(sliced).scalars().all())
    return items, total


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single aggregate.

    Subclasses MUST define ``model`` and MAY override the whitelist hooks
    (``_sortable_fields``, ``_filterable_fields``, ``_updatable_fields``,
    ``_searchable_fields``).
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Injected session, or the Flask-scoped one when none was given."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Whitelists -------------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _searchable_fields(self) -> Sequence[InstrumentedAttribute[Any]]:
        return ()

    def _updatable_fields(self) -> set[str]:
        return set()

    # ------------------------------ Internals --------------------------------

    def _base_select(self) -> Select[Any]:
        """Starting statement for every read; scoped subclasses narrow it."""
        return select(self.model)

    def _apply_equality_filters(
        self, stmt: Select[Any], filters: Mapping[str, Any] | None
    ) -> Select[Any]:
        """Apply whitelisted equality filters; unknown keys are ignored."""
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses = [allowed[k] == v for k, v in filters.items() if k in allowed]
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _apply_search(self, stmt: Select[Any], term: str | None) -> Select[Any]:
        columns = self._searchable_fields()
        if not term or not columns:
            return stmt
        pattern = f"%{term.strip().lower()}%"
        return stmt.where(or_(*(func.lower(col).like(pattern) for col in columns)))

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return only whitelisted keys.

        :raises ValueError: On unknown or non-updatable keys.
        """
        allowed = self._updatable_fields()
        unknown = [k for k in fields if k not in allowed]
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush to materialize its primary key."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = self._base_select().where(pk_attr == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        stmt = self._apply_equality_filters(self._base_select(), filters)
        return self.session.execute(stmt.limit(1)).first() is not None

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def refresh(self, instance: E) -> E:
        """Reload ``instance`` so database-generated values are current."""
        self.session.refresh(instance)
        return instance

    def update(self, instance: E, **fields: Any) -> E:
        """Assign whitelisted fields through ``setattr`` (runs ``@validates``)."""
        for key, value in self._sanitize_update_fields(fields).items():
            setattr(instance, key, value)
        self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
    ) -> list[E]:
        """List every matching entity with whitelisted filters and sorting."""
        stmt = self._apply_equality_filters(self._base_select(), filters)
        stmt = _apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())
        return cast(list[E], list(self.session.execute(stmt).scalars().all()))

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        with_total: bool = True,
    ) -> Page[E]:
        """Paginate with search, whitelisted filters and stable sorting."""
        stmt = self._apply_equality_filters(self._base_select(), filters)
        stmt = self._apply_search(stmt, pagination.search)
        stmt = _apply_sorting(
            stmt, self._sortable_fields(), pagination.sort, pk_attr=self._pk_attr()
        )
        items, total = paginate_select(
            self.session,
            stmt,
            page=pagination.page,
            limit=pagination.limit,
            with_total=with_total,
        )
        return Page(items=cast(list[E], items), total=total, page=pagination.page, limit=pagination.limit)


class TenantScopedRepository(BaseRepository[E]):
    """Repository whose every read is restricted to one tenant.

    The tenant comes from the caller's verified identity; it is never taken
    from request input. A row of another tenant is indistinguishable from a
    missing row.
    """

    def __init__(self, session: Session | None = None, *, tenant_id: str | None = None) -> None:
        super().__init__(session=session)
        self._tenant_id = tenant_id

    def for_tenant(self, tenant_id: str) -> TenantScopedRepository[E]:
        """Return a copy of this repository bound to ``tenant_id``."""
        return type(self)(session=self._session, tenant_id=tenant_id)

    @property
    def tenant_id(self) -> str:
        if not self._tenant_id:
            raise RuntimeError(f"{type(self).__name__} used without a tenant scope.")
        return self._tenant_id

    def _base_select(self) -> Select[Any]:
        tenant_col = getattr(self.model, "tenant_id")
        return select(self.model).where(tenant_col == self.tenant_id)

    def add(self, instance: E) -> E:
        """Stamp the scoped tenant onto ``instance`` before persisting it."""
        setattr(instance, "tenant_id", self.tenant_id)
        return super().add(instance)
