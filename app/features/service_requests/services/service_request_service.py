"""
Service request service - create, list and move requests through their lifecycle.

Service layer returns domain models only; the API layer handles HTTP concerns.
"""

from dataclasses import dataclass
from datetime import date

from app.core.clock import Clock, utc_now
from app.core.errors import InvalidTransitionError, NotFoundError, StoreError, ValidationError
from app.features.providers.repository.provider_repository import ProviderRepository
from app.infrastructure.observability.logging import get_logger
from app.models.domain.user_domain import Caller

from ..domain.lifecycle import apply_transition, authorize_caller
from ..domain.models import RequestStatus, ServiceRequest
from ..repository.service_request_repository import ServiceRequestRepository, ServiceRequestView

logger = get_logger(__name__)


@dataclass(slots=True)
class NewServiceRequest:
    provider_id: str
    service_category: str
    description: str
    location: str
    preferred_date: date | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    urgency: str | None = None
    contact_phone: str | None = None


class ServiceRequestService:
    def __init__(
        self,
        repository=ServiceRequestRepository,
        provider_repository=ProviderRepository,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.provider_repository = provider_repository
        self.clock = clock

    async def create_request(self, caller: Caller, data: NewServiceRequest) -> ServiceRequest:
        if (
            data.budget_min is not None
            and data.budget_max is not None
            and data.budget_min > data.budget_max
        ):
            raise ValidationError(
                "budget_min cannot be greater than budget_max", operation="create_request"
            )

        provider = await self.provider_repository.get(data.provider_id)
        if not provider:
            raise NotFoundError("Service provider not found", operation="create_request")

        request = ServiceRequest(
            id="",
            user_id=caller.user_id,
            provider_id=data.provider_id,
            provider_user_id=provider.user_id,
            service_category=data.service_category,
            description=data.description,
            location=data.location,
            status=RequestStatus.PENDING,
            created_at=self.clock(),
            preferred_date=data.preferred_date,
            budget_min=data.budget_min,
            budget_max=data.budget_max,
            urgency=data.urgency,
            contact_phone=data.contact_phone,
        )

        try:
            created = await self.repository.create(request)
        except StoreError:
            logger.error(
                "Error creating service request",
                user_id=caller.user_id,
                provider_id=data.provider_id,
            )
            raise

        logger.info(
            "Service request created",
            request_id=created.id,
            user_id=caller.user_id,
            provider_id=data.provider_id,
            category=data.service_category,
        )
        return created

    async def list_my_requests(
        self, caller: Caller, status: RequestStatus | None, page: int, limit: int
    ) -> list[ServiceRequestView]:
        offset = (page - 1) * limit
        return await self.repository.list_for_client(caller.user_id, status, limit, offset)

    async def list_provider_requests(
        self, caller: Caller, status: RequestStatus | None, page: int, limit: int
    ) -> list[ServiceRequestView]:
        if await self.repository.count_providers_owned(caller.user_id) == 0:
            return []
        offset = (page - 1) * limit
        return await self.repository.list_for_provider_owner(caller.user_id, status, limit, offset)

    async def get_request(self, caller: Caller, request_id: str) -> ServiceRequestView:
        view = await self.repository.get_view(request_id)
        if not view:
            raise NotFoundError("Service request not found", operation="get_request")

        authorize_caller(view.request, caller)
        return view

    async def update_status(
        self,
        caller: Caller,
        request_id: str,
        target: str | RequestStatus,
        notes: str | None = None,
    ) -> ServiceRequest:
        current = await self.repository.get(request_id)
        if not current:
            raise NotFoundError("Service request not found", operation="update_status")

        updated = apply_transition(current, target, caller, self.clock(), notes=notes)

        try:
            persisted = await self.repository.update_status(updated, expected_status=current.status)
        except StoreError:
            logger.error(
                "Error updating service request status",
                request_id=request_id,
                user_id=caller.user_id,
            )
            raise

        if not persisted:
            await self._raise_lost_update(request_id, str(updated.status))

        logger.info(
            "Service request status updated",
            request_id=request_id,
            old_status=str(current.status),
            new_status=str(updated.status),
            user_id=caller.user_id,
        )
        return updated

    async def _raise_lost_update(self, request_id: str, attempted: str) -> None:
        """The row changed between read and write: report it against its new state."""
        latest = await self.repository.get(request_id)
        if not latest:
            raise NotFoundError("Service request not found", operation="update_status")

        logger.warning(
            "Service request status changed concurrently",
            request_id=request_id,
            current_status=str(latest.status),
            attempted_status=attempted,
        )
        raise InvalidTransitionError(str(latest.status), attempted)


service_request_service = ServiceRequestService()
