"""
Postgres repository for service requests.
"""

from dataclasses import dataclass
from typing import Any

from app.db.helpers import fetch_all, fetch_one, fetch_val
from app.infrastructure.observability.logging import get_logger

from ..domain.models import RequestStatus, ServiceRequest

logger = get_logger(__name__)

_REQUEST_COLUMNS = """
    sr.id, sr.user_id, sr.provider_id, sp.user_id AS provider_user_id,
    sr.service_category, sr.description, sr.location, sr.status,
    sr.preferred_date, sr.budget_min, sr.budget_max, sr.urgency,
    sr.contact_phone, sr.notes, sr.created_at, sr.updated_at,
    sr.accepted_at, sr.completed_at
"""


@dataclass(slots=True)
class ServiceRequestView:
    """A request plus the counterpart details shown in listings."""

    request: ServiceRequest
    provider: dict[str, Any] | None = None
    requester: dict[str, Any] | None = None


def _to_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def row_to_request(row: dict[str, Any]) -> ServiceRequest:
    return ServiceRequest(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        provider_id=str(row["provider_id"]),
        provider_user_id=str(row["provider_user_id"]) if row.get("provider_user_id") else None,
        service_category=row["service_category"],
        description=row["description"],
        location=row["location"],
        status=RequestStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
        preferred_date=row.get("preferred_date"),
        budget_min=_to_float(row.get("budget_min")),
        budget_max=_to_float(row.get("budget_max")),
        urgency=row.get("urgency"),
        contact_phone=row.get("contact_phone"),
        notes=row.get("notes"),
        accepted_at=row.get("accepted_at"),
        completed_at=row.get("completed_at"),
    )


class ServiceRequestRepository:
    """Thin wrappers around service_requests queries."""

    @staticmethod
    async def get(request_id: str) -> ServiceRequest | None:
        row = await fetch_one(
            f"""
            SELECT {_REQUEST_COLUMNS}
            FROM service_requests sr
            LEFT JOIN service_providers sp ON sp.id = sr.provider_id
            WHERE sr.id = %s
            """,
            (request_id,),
        )
        return row_to_request(row) if row else None

    @staticmethod
    async def get_view(request_id: str) -> ServiceRequestView | None:
        row = await fetch_one(
            f"""
            SELECT {_REQUEST_COLUMNS},
                sp.business_name, sp.location AS provider_location,
                sp.phone AS provider_phone, sp.email AS provider_email, sp.verified,
                p.full_name AS requester_name, p.email AS requester_email,
                p.phone AS requester_phone
            FROM service_requests sr
            LEFT JOIN service_providers sp ON sp.id = sr.provider_id
            LEFT JOIN profiles p ON p.id = sr.user_id
            WHERE sr.id = %s
            """,
            (request_id,),
        )
        if not row:
            return None
        return ServiceRequestView(
            request=row_to_request(row),
            provider=_provider_summary(row),
            requester=_requester_summary(row),
        )

    @staticmethod
    async def create(request: ServiceRequest) -> ServiceRequest:
        row = await fetch_one(
            """
            INSERT INTO service_requests (
                user_id, provider_id, service_category, description, location,
                status, preferred_date, budget_min, budget_max, urgency,
                contact_phone, created_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (
                request.user_id,
                request.provider_id,
                request.service_category,
                request.description,
                request.location,
                str(request.status),
                request.preferred_date,
                request.budget_min,
                request.budget_max,
                request.urgency,
                request.contact_phone,
                request.created_at,
            ),
        )
        request.id = str(row["id"])
        logger.info("Service request inserted", request_id=request.id, provider_id=request.provider_id)
        return request

    @staticmethod
    async def update_status(request: ServiceRequest, expected_status: RequestStatus) -> bool:
        """
        Persist status, notes and lifecycle timestamps of an already-validated request.

        Only writes when the stored status still equals expected_status, so two
        concurrent transitions from the same state cannot both land.
        """
        row = await fetch_one(
            """
            UPDATE service_requests
            SET status = %s,
                notes = %s,
                accepted_at = %s,
                completed_at = %s,
                updated_at = %s
            WHERE id = %s
              AND status = %s
            RETURNING id
            """,
            (
                str(request.status),
                request.notes,
                request.accepted_at,
                request.completed_at,
                request.updated_at,
                request.id,
                str(expected_status),
            ),
        )
        return row is not None

    @staticmethod
    async def list_for_client(
        user_id: str, status: RequestStatus | None, limit: int, offset: int
    ) -> list[ServiceRequestView]:
        params: list[Any] = [user_id]
        status_clause = ""
        if status:
            status_clause = "AND sr.status = %s"
            params.append(str(status))
        params.extend([limit, offset])

        rows = await fetch_all(
            f"""
            SELECT {_REQUEST_COLUMNS},
                sp.business_name, sp.location AS provider_location,
                sp.phone AS provider_phone, sp.email AS provider_email, sp.verified
            FROM service_requests sr
            LEFT JOIN service_providers sp ON sp.id = sr.provider_id
            WHERE sr.user_id = %s {status_clause}
            ORDER BY sr.created_at DESC
            LIMIT %s OFFSET %s
            """,
            tuple(params),
        )
        return [ServiceRequestView(request=row_to_request(r), provider=_provider_summary(r)) for r in rows]

    @staticmethod
    async def list_for_provider_owner(
        owner_user_id: str, status: RequestStatus | None, limit: int, offset: int
    ) -> list[ServiceRequestView]:
        params: list[Any] = [owner_user_id]
        status_clause = ""
        if status:
            status_clause = "AND sr.status = %s"
            params.append(str(status))
        params.extend([limit, offset])

        rows = await fetch_all(
            f"""
            SELECT {_REQUEST_COLUMNS},
                p.full_name AS requester_name, p.email AS requester_email,
                p.phone AS requester_phone
            FROM service_requests sr
            JOIN service_providers sp ON sp.id = sr.provider_id
            LEFT JOIN profiles p ON p.id = sr.user_id
            WHERE sp.user_id = %s {status_clause}
            ORDER BY sr.created_at DESC
            LIMIT %s OFFSET %s
            """,
            tuple(params),
        )
        return [
            ServiceRequestView(request=row_to_request(r), requester=_requester_summary(r))
            for r in rows
        ]

    @staticmethod
    async def count_providers_owned(owner_user_id: str) -> int:
        count = await fetch_val(
            "SELECT COUNT(*) FROM service_providers WHERE user_id = %s", (owner_user_id,)
        )
        return int(count or 0)


def _provider_summary(row: dict[str, Any]) -> dict[str, Any] | None:
    if row.get("business_name") is None:
        return None
    return {
        "id": str(row["provider_id"]),
        "business_name": row["business_name"],
        "location": row.get("provider_location"),
        "phone": row.get("provider_phone"),
        "email": row.get("provider_email"),
        "verified": row.get("verified"),
    }


def _requester_summary(row: dict[str, Any]) -> dict[str, Any] | None:
    if row.get("requester_email") is None and row.get("requester_name") is None:
        return None
    return {
        "id": str(row["user_id"]),
        "full_name": row.get("requester_name"),
        "email": row.get("requester_email"),
        "phone": row.get("requester_phone"),
    }
