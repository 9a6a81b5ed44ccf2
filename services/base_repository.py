"""
Base repository for Supabase-backed tables.

Wraps the five data-access calls every entity needs (list, get, insert,
update, delete), turns backend failures into application errors and
returns tagged lookups for single-row reads.
"""

from typing import Any, Generic, Optional, TypeVar
import structlog

from config.database import get_supabase_client
from exceptions import (
    AppError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from models.result import Found, NotFound, Failed, Lookup

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# PostgreSQL error codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def translate_store_error(operation: str, table: str, e: Exception) -> AppError:
    """
    Map a backend exception to an application error.

    Constraint violations keep their meaning (conflict / bad reference);
    everything else becomes a generic DatabaseError.
    """
    if isinstance(e, AppError):
        return e

    code = getattr(e, "code", None)
    text = str(e)

    if code == UNIQUE_VIOLATION or "duplicate key value" in text:
        return ConflictError(
            code="DUPLICATE_RESOURCE",
            message="Resource already exists",
            details={"table": table}
        )
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return ValidationError(
            code="FOREIGN_KEY_ERROR",
            message="Referenced resource not found",
            details={"table": table}
        )
    return DatabaseError(operation, text, details={"table": table})


class BaseRepository(Generic[T]):
    """
    CRUD against one Supabase table.

    Subclasses set the table, the response model, the not-found error and
    the default ordering.
    """

    table: str = ""
    response_model: type = dict
    not_found_error: type[NotFoundError] = NotFoundError
    order_by: str = "created_at"
    order_desc: bool = True

    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        """Injected client, or the shared Supabase client."""
        return self._db if self._db is not None else get_supabase_client()

    def _to_response(self, row: dict) -> T:
        return self.response_model(**row)

    def _not_found(self, row_id: str) -> NotFoundError:
        if self.not_found_error is NotFoundError:
            return NotFoundError(self.table, row_id)
        return self.not_found_error(row_id)

    # ===================
    # READ OPERATIONS
    # ===================

    def _select(self):
        return self.db.table(self.table).select("*")

    def _run_list(self, query, **log_context) -> list[T]:
        """Execute a prepared select and convert the rows."""
        try:
            result = query.order(self.order_by, desc=self.order_desc).execute()
        except Exception as e:
            logger.error(
                "list_rows_failed",
                table=self.table,
                error=str(e),
                **log_context
            )
            raise translate_store_error("select", self.table, e) from e

        rows = [self._to_response(row) for row in (result.data or [])]

        logger.debug("rows_listed", table=self.table, count=len(rows), **log_context)
        return rows

    def fetch_all(self, filters: Optional[dict[str, Any]] = None) -> list[T]:
        """
        List rows matching equality filters.

        Args:
            filters: column → value; None values are ignored

        Returns:
            Rows in the repository's default order
        """
        query = self._select()
        for column, value in (filters or {}).items():
            if value is not None:
                query = query.eq(column, value)
        return self._run_list(query, filters=filters)

    def find(self, row_id: str) -> Lookup:
        """
        Look up one row by id.

        Returns:
            Found(row), NotFound(id), or Failed(detail) when the store call fails
        """
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", row_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("find_row_failed", table=self.table, row_id=row_id, error=str(e))
            return Failed(str(e))

        if not result.data:
            return NotFound(row_id)
        return Found(self._to_response(result.data[0]))

    def get_by_id(self, row_id: str) -> T:
        """
        Get one row by id.

        Raises:
            NotFoundError: Entity-specific subclass when the id is unknown
            DatabaseError: If the store call fails
        """
        lookup = self.find(row_id)
        if isinstance(lookup, Found):
            return lookup.value
        if isinstance(lookup, NotFound):
            raise self._not_found(lookup.id)
        raise DatabaseError("select", lookup.detail, details={"table": self.table})

    def count(self, filters: Optional[dict[str, Any]] = None) -> int:
        """Count rows matching equality filters."""
        try:
            query = self.db.table(self.table).select("id", count="exact")
            for column, value in (filters or {}).items():
                if value is not None:
                    query = query.eq(column, value)
            result = query.execute()
            return result.count or 0
        except Exception as e:
            logger.error("count_rows_failed", table=self.table, error=str(e))
            raise translate_store_error("count", self.table, e) from e

    # ===================
    # WRITE OPERATIONS
    # ===================

    def insert_row(self, data: dict[str, Any]) -> T:
        """Insert one row and return it as stored."""
        try:
            result = self.db.table(self.table).insert(data).execute()
        except Exception as e:
            logger.error("insert_row_failed", table=self.table, error=str(e))
            raise translate_store_error("insert", self.table, e) from e

        if not result.data:
            raise DatabaseError("insert", "no row returned", details={"table": self.table})
        return self._to_response(result.data[0])

    def update_row(
        self,
        row_id: str,
        patch: dict[str, Any],
        existing: Optional[T] = None
    ) -> T:
        """
        Merge the provided fields into an existing row.

        Args:
            row_id: Row UUID
            patch: Only the fields to change
            existing: Already-fetched row, skips the existence check

        Raises:
            NotFoundError: If the row does not exist
        """
        if existing is None:
            existing = self.get_by_id(row_id)

        if not patch:
            # Nothing to update, return existing
            return existing

        try:
            result = (
                self.db.table(self.table)
                .update(patch)
                .eq("id", row_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_row_failed", table=self.table, row_id=row_id, error=str(e))
            raise translate_store_error("update", self.table, e) from e

        if not result.data:
            # Deleted between the existence check and the update
            raise self._not_found(row_id)
        return self._to_response(result.data[0])

    def delete_row(self, row_id: str) -> None:
        """
        Delete a row.

        Raises:
            NotFoundError: If the row does not exist
        """
        self.get_by_id(row_id)

        try:
            self.db.table(self.table).delete().eq("id", row_id).execute()
        except Exception as e:
            logger.error("delete_row_failed", table=self.table, row_id=row_id, error=str(e))
            raise translate_store_error("delete", self.table, e) from e

    def set_sort_orders(self, ordered_ids: list[str], current: dict[str, int]) -> int:
        """
        Write sort_order = position for each id whose position changed.

        One update per row, no version check: the last reorder wins.

        Returns:
            Number of rows written
        """
        written = 0
        for index, row_id in enumerate(ordered_ids):
            if current.get(row_id) == index:
                continue
            try:
                (
                    self.db.table(self.table)
                    .update({"sort_order": index})
                    .eq("id", row_id)
                    .execute()
                )
            except Exception as e:
                logger.error(
                    "reorder_row_failed",
                    table=self.table,
                    row_id=row_id,
                    error=str(e)
                )
                raise translate_store_error("update", self.table, e) from e
            written += 1
        return written
