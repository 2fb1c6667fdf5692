"""Chainable query-builder client over the namespaced collection store.

Mimics a remote relational client:

    client.from_("calls").select("*, agent:agents(name)").eq("direction", "inbound")
        .order("started_at", desc=True).limit(10).execute()

Nothing runs until execute() (or await). Each execution is one
load(-modify-save) cycle against the tenant of the current session, through
the same CollectionStore the CRUD manager uses. Results are QueryResponse
values; this facade never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sessionstore.application.dtos.results import ErrorInfo, QueryResponse
from sessionstore.application.services.collection_manager import merge_patch, new_record
from sessionstore.core.constants import GENERIC_ERROR_MESSAGE, INTERNAL_ERROR_CODE
from sessionstore.domain.enums import SessionState, canonical_collection
from sessionstore.domain.exceptions import SessionExpiredException, StoreException
from sessionstore.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from sessionstore.application.interfaces.ports import ISessionProvider
    from sessionstore.infrastructure.storage.collection_store import CollectionStore

logger = logging.getLogger(__name__)

Record = dict[str, Any]

_SELECT = "select"
_INSERT = "insert"
_UPDATE = "update"
_DELETE = "delete"


def parse_columns(columns: str) -> list[str] | None:
    """Parse a select list into plain column names; None means every column.

    Embedded resource specs such as 'agent:agents(name)' are skipped.
    """
    names: list[str] = []
    depth = 0
    token = ""
    for ch in f"{columns},":
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            token = token.strip()
            if token == "*":
                return None
            if token and "(" not in token:
                names.append(token)
            token = ""
        else:
            token += ch
    return names or None


def _project(record: Mapping[str, Any], columns: list[str] | None) -> Record:
    if columns is None:
        return dict(record)
    return {c: record[c] for c in columns if c in record}


def _sort(records: list[Record], column: str, desc: bool) -> list[Record]:
    """Stable sort on column; rows without a value always go last."""
    present = [r for r in records if r.get(column) is not None]
    missing = [r for r in records if r.get(column) is None]
    present.sort(key=lambda r: r[column], reverse=desc)
    return present + missing


class QueryBuilder:
    """One lazily evaluated query against a single table (collection)."""

    def __init__(
        self,
        store: CollectionStore,
        session_provider: ISessionProvider,
        table: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._session_provider = session_provider
        self.table = canonical_collection(table)
        self._clock = clock
        self._action = _SELECT
        self._columns: list[str] | None = None
        self._returning = False
        self._filters: list[tuple[str, Any]] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._single = False
        self._rows: list[Record] = []
        self._patch: Record = {}
        self._invalid: ErrorInfo | None = None

    # -- chain -------------------------------------------------------------

    def select(self, columns: str = "*") -> QueryBuilder:
        """Choose columns. After insert/update/delete, selects the affected rows to return."""
        self._columns = parse_columns(columns)
        if self._action != _SELECT:
            self._returning = True
        return self

    def eq(self, column: str, value: Any) -> QueryBuilder:
        """Keep rows where column equals value (filters combine with AND)."""
        self._filters.append((column, value))
        return self

    def order(self, column: str, *, desc: bool = False) -> QueryBuilder:
        self._order.append((column, desc))
        return self

    def limit(self, count: int) -> QueryBuilder:
        """Keep at most count rows; a negative count fails at execute()."""
        if count < 0:
            self._invalid = ErrorInfo("INVALID_QUERY", "limit must be >= 0", {"limit": count})
            return self
        self._limit = count
        return self

    def single(self) -> QueryBuilder:
        """Return the first matching row (or None) instead of a list."""
        self._single = True
        return self

    def insert(self, rows: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> QueryBuilder:
        self._action = _INSERT
        if isinstance(rows, Mapping):
            self._rows = [dict(rows)]
        else:
            self._rows = [dict(r) for r in rows]
        return self

    def update(self, patch: Mapping[str, Any]) -> QueryBuilder:
        self._action = _UPDATE
        self._patch = dict(patch)
        return self

    def delete(self) -> QueryBuilder:
        self._action = _DELETE
        return self

    # -- terminal ----------------------------------------------------------

    def execute(self) -> QueryResponse:
        """Run the query once and return QueryResponse(data, error)."""
        if self._invalid is not None:
            return QueryResponse(error=self._invalid)
        session = self._session_provider.current_session()
        tenant_id = session.tenant_id
        if tenant_id is None:
            if session.state == SessionState.EXPIRED:
                return QueryResponse(error=ErrorInfo.from_exception(SessionExpiredException()))
            return QueryResponse(error=ErrorInfo("NO_SESSION", "No active session"))
        try:
            rows = self._run(tenant_id)
        except StoreException as e:
            logger.warning("Query on %s failed: %s", self.table, e.error_code)
            return QueryResponse(error=ErrorInfo.from_exception(e))
        except Exception:
            logger.exception("Unexpected query failure on %s", self.table)
            return QueryResponse(error=ErrorInfo(INTERNAL_ERROR_CODE, GENERIC_ERROR_MESSAGE))

        if self._action != _SELECT and not self._returning:
            return QueryResponse(data=None)
        rows = [_project(r, self._columns) for r in rows]
        if self._single:
            return QueryResponse(data=rows[0] if rows else None)
        return QueryResponse(data=rows)

    def __await__(self) -> Generator[Any, None, QueryResponse]:
        return self._execute_async().__await__()

    async def _execute_async(self) -> QueryResponse:
        return self.execute()

    # -- internals ---------------------------------------------------------

    def _matches(self, record: Mapping[str, Any]) -> bool:
        return all(record.get(col) == value for col, value in self._filters)

    def _run(self, tenant_id: str) -> list[Record]:
        records = self._store.load(tenant_id, self.table, strict=True)
        if self._action == _SELECT:
            return self._read(records)
        if self._action == _INSERT:
            return self._insert(tenant_id, records)
        if self._action == _UPDATE:
            return self._update(tenant_id, records)
        return self._delete(tenant_id, records)

    def _read(self, records: list[Record]) -> list[Record]:
        rows = [r for r in records if self._matches(r)]
        for column, desc in reversed(self._order):
            rows = _sort(rows, column, desc)
        if self._limit is not None:
            rows = rows[: self._limit]
        return rows

    def _insert(self, tenant_id: str, records: list[Record]) -> list[Record]:
        now = self._clock()
        # one row per id; a later row with the same id replaces an earlier one
        created = list(
            {r["id"]: r for r in (new_record(self.table, row, tenant_id, now) for row in self._rows)}.values()
        )
        new_ids = {r["id"] for r in created}
        kept = [r for r in records if r.get("id") not in new_ids]
        self._store.save(tenant_id, self.table, created + kept)
        return created

    def _update(self, tenant_id: str, records: list[Record]) -> list[Record]:
        if not self._filters:
            logger.warning("Ignoring update on %s without filters", self.table)
            return []
        now = self._clock()
        changed: list[Record] = []
        for i, record in enumerate(records):
            if self._matches(record):
                records[i] = merge_patch(record, self._patch, now)
                changed.append(records[i])
        if changed:
            self._store.save(tenant_id, self.table, records)
        return changed

    def _delete(self, tenant_id: str, records: list[Record]) -> list[Record]:
        if not self._filters:
            logger.warning("Ignoring delete on %s without filters", self.table)
            return []
        removed = [r for r in records if self._matches(r)]
        if removed:
            self._store.save(tenant_id, self.table, [r for r in records if not self._matches(r)])
        return removed


class QueryClient:
    """Entry point of the query facade; tenant comes from the session provider."""

    def __init__(
        self,
        store: CollectionStore,
        session_provider: ISessionProvider,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._session_provider = session_provider
        self._clock = clock

    def from_(self, table: str) -> QueryBuilder:
        """Start a query on table (collection name or snake_case alias)."""
        return QueryBuilder(self._store, self._session_provider, table, self._clock)

    table = from_
