# app/db/helpers.py
"""
Database helper functions for common patterns.
Reduces boilerplate in repositories.

Every psycopg failure is re-raised as StoreError so callers only deal with
the domain error taxonomy.
"""

from typing import Any

import psycopg
from psycopg import sql

from app.core.errors import StoreError
from app.db.pool import get_db_connection
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def _preview(query: str | sql.Composable) -> str:
    """First 100 chars of a query for logs; accepts str or psycopg.sql.Composable."""
    text = query if isinstance(query, str) else repr(query)
    return text[:100]


async def fetch_one(
    query: str | sql.Composable,
    params: tuple = (),
    *,
    connection: psycopg.AsyncConnection | None = None,
) -> dict[str, Any] | None:
    """
    Execute query and return single row as dict.

    Also used for ``INSERT/UPDATE ... RETURNING`` statements.

    Args:
        query: SQL query with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        Dict with row data or None if no results
    """
    try:
        if connection:
            async with connection.cursor() as cur:
                await cur.execute(query, params)
                row = await cur.fetchone()
                return row if row else None
        else:
            async with await get_db_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    row = await cur.fetchone()
                    return row if row else None

    except psycopg.Error as e:
        logger.error("Database fetch_one error", query=_preview(query), error=str(e))
        raise StoreError(f"Query failed: {e}", operation="fetch_one") from e


async def fetch_all(
    query: str | sql.Composable,
    params: tuple = (),
    *,
    connection: psycopg.AsyncConnection | None = None,
) -> list[dict[str, Any]]:
    """
    Execute query and return all rows as list of dicts.

    Args:
        query: SQL query with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        List of dicts with row data
    """
    try:
        if connection:
            async with connection.cursor() as cur:
                await cur.execute(query, params)
                return await cur.fetchall()
        else:
            async with await get_db_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    return await cur.fetchall()

    except psycopg.Error as e:
        logger.error("Database fetch_all error", query=_preview(query), error=str(e))
        raise StoreError(f"Query failed: {e}", operation="fetch_all") from e


async def fetch_val(
    query: str | sql.Composable,
    params: tuple = (),
    *,
    connection: psycopg.AsyncConnection | None = None,
) -> Any:
    """
    Execute query and return single value from the first column of the first row.
    """
    row = await fetch_one(query, params, connection=connection)
    return list(row.values())[0] if row else None


async def execute_query(
    query: str | sql.Composable,
    params: tuple = (),
    *,
    connection: psycopg.AsyncConnection | None = None,
) -> int:
    """
    Execute query and return number of affected rows.

    Args:
        query: SQL query with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        Number of affected rows
    """
    try:
        if connection:
            cursor = await connection.execute(query, params)
            return cursor.rowcount
        else:
            async with await get_db_connection() as conn:
                cursor = await conn.execute(query, params)
                return cursor.rowcount

    except psycopg.Error as e:
        logger.error("Database execute error", query=_preview(query), error=str(e))
        raise StoreError(f"Query failed: {e}", operation="execute") from e

