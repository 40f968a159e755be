"""
Postgres repository for service providers.
"""

from typing import Any

from psycopg import sql

from app.db.helpers import execute_query, fetch_all, fetch_one, fetch_val
from app.infrastructure.observability.logging import get_logger

from ..domain.models import Provider, ProviderFilters

logger = get_logger(__name__)

UPDATABLE_FIELDS = (
    "business_name",
    "business_description",
    "category",
    "subcategory",
    "location",
    "phone",
    "email",
    "website",
)

_PROVIDER_COLUMNS = """
    sp.id, sp.user_id, sp.business_name, sp.business_description, sp.category,
    sp.subcategory, sp.location, sp.phone, sp.email, sp.website, sp.verified,
    sp.verified_at, sp.rating_average, sp.rating_count, sp.created_at, sp.updated_at,
    sc.id AS category_id, sc.name AS category_name, sc.icon AS category_icon
"""


def row_to_provider(row: dict[str, Any]) -> Provider:
    category = None
    if row.get("category_id") is not None:
        category = {
            "id": str(row["category_id"]),
            "name": row.get("category_name"),
            "icon": row.get("category_icon"),
        }
    rating = row.get("rating_average")
    return Provider(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        business_name=row["business_name"],
        business_description=row["business_description"],
        category=row["category"],
        location=row["location"],
        email=row["email"],
        verified=bool(row["verified"]),
        created_at=row["created_at"],
        subcategory=row.get("subcategory"),
        phone=row.get("phone"),
        website=row.get("website"),
        rating_average=float(rating) if rating is not None else None,
        rating_count=row.get("rating_count") or 0,
        verified_at=row.get("verified_at"),
        updated_at=row.get("updated_at"),
        service_category=category,
    )


def _filter_clause(filters: ProviderFilters) -> tuple[str, list[Any]]:
    conditions: list[str] = []
    params: list[Any] = []

    if filters.category:
        conditions.append("sp.category = %s")
        params.append(filters.category)
    if filters.location:
        conditions.append("sp.location ILIKE %s")
        params.append(f"%{filters.location}%")
    if filters.verified is not None:
        conditions.append("sp.verified = %s")
        params.append(filters.verified)
    if filters.search:
        conditions.append("(sp.business_name ILIKE %s OR sp.business_description ILIKE %s)")
        params.extend([f"%{filters.search}%", f"%{filters.search}%"])

    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return where, params


class ProviderRepository:
    """Thin wrappers around service_providers queries."""

    @staticmethod
    async def list(filters: ProviderFilters, limit: int, offset: int) -> list[Provider]:
        where, params = _filter_clause(filters)
        rows = await fetch_all(
            f"""
            SELECT {_PROVIDER_COLUMNS}
            FROM service_providers sp
            LEFT JOIN service_categories sc ON sc.name = sp.category
            {where}
            ORDER BY sp.verified DESC, sp.rating_average DESC NULLS LAST, sp.created_at DESC
            LIMIT %s OFFSET %s
            """,
            tuple(params + [limit, offset]),
        )
        return [row_to_provider(row) for row in rows]

    @staticmethod
    async def count(filters: ProviderFilters) -> int:
        where, params = _filter_clause(filters)
        total = await fetch_val(
            f"SELECT COUNT(*) FROM service_providers sp {where}",
            tuple(params),
        )
        return int(total or 0)

    @staticmethod
    async def get(provider_id: str) -> Provider | None:
        row = await fetch_one(
            f"""
            SELECT {_PROVIDER_COLUMNS}
            FROM service_providers sp
            LEFT JOIN service_categories sc ON sc.name = sp.category
            WHERE sp.id = %s
            """,
            (provider_id,),
        )
        return row_to_provider(row) if row else None

    @staticmethod
    async def create(user_id: str, data: dict[str, Any]) -> str:
        fields = [name for name in UPDATABLE_FIELDS if data.get(name) is not None]
        columns = ["user_id", "verified", *fields]
        values = [user_id, False, *(data[name] for name in fields)]

        query = sql.SQL(
            "INSERT INTO service_providers ({columns}, created_at) "
            "VALUES ({values}, NOW()) RETURNING id"
        ).format(
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        row = await fetch_one(query, tuple(values))
        logger.info("Service provider inserted", provider_id=str(row["id"]), user_id=user_id)
        return str(row["id"])

    @staticmethod
    async def update(provider_id: str, changes: dict[str, Any]) -> bool:
        fields = [name for name in UPDATABLE_FIELDS if name in changes]
        if not fields:
            return True

        query = sql.SQL("UPDATE service_providers SET {assignments}, updated_at = NOW() WHERE id = %s").format(
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
            )
        )
        affected = await execute_query(query, (*(changes[name] for name in fields), provider_id))
        return affected > 0

    @staticmethod
    async def delete(provider_id: str) -> bool:
        affected = await execute_query("DELETE FROM service_providers WHERE id = %s", (provider_id,))
        return affected > 0

    @staticmethod
    async def set_verified(provider_id: str, verified: bool) -> bool:
        affected = await execute_query(
            """
            UPDATE service_providers
            SET verified = %s,
                verified_at = CASE WHEN %s THEN NOW() ELSE NULL END,
                updated_at = NOW()
            WHERE id = %s
            """,
            (verified, verified, provider_id),
        )
        logger.info("Provider verification updated", provider_id=provider_id, verified=verified, rows=affected)
        return affected > 0
