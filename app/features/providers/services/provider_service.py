"""
Provider directory service - listing, ownership-checked edits and admin verification.
"""

from typing import Any

from app.core.errors import NotFoundError, PermissionDeniedError
from app.infrastructure.observability.logging import get_logger
from app.models.domain.user_domain import Caller

from ..domain.models import Provider, ProviderFilters, ProviderPage
from ..repository.provider_repository import ProviderRepository

logger = get_logger(__name__)


class ProviderService:
    def __init__(self, repository=ProviderRepository):
        self.repository = repository

    async def list_providers(self, filters: ProviderFilters, page: int, limit: int) -> ProviderPage:
        offset = (page - 1) * limit
        providers = await self.repository.list(filters, limit, offset)
        total = await self.repository.count(filters)
        return ProviderPage(providers=providers, page=page, limit=limit, total_items=total)

    async def get_provider(self, provider_id: str) -> Provider:
        provider = await self.repository.get(provider_id)
        if not provider:
            raise NotFoundError("Service provider not found", operation="get_provider")
        return provider

    async def create_provider(self, caller: Caller, data: dict[str, Any]) -> Provider:
        provider_id = await self.repository.create(caller.user_id, data)
        provider = await self.get_provider(provider_id)

        logger.info(
            "Service provider created",
            provider_id=provider_id,
            user_id=caller.user_id,
            business_name=provider.business_name,
        )
        return provider

    async def _get_owned(self, caller: Caller, provider_id: str, action: str) -> Provider:
        provider = await self.get_provider(provider_id)
        if provider.user_id != caller.user_id and not caller.is_admin:
            raise PermissionDeniedError(
                f"You can only {action} your own service providers",
                operation=f"{action}_provider",
            )
        return provider

    async def update_provider(
        self, caller: Caller, provider_id: str, changes: dict[str, Any]
    ) -> Provider:
        await self._get_owned(caller, provider_id, "update")
        await self.repository.update(provider_id, changes)

        logger.info(
            "Service provider updated",
            provider_id=provider_id,
            user_id=caller.user_id,
            changes=sorted(changes),
        )
        return await self.get_provider(provider_id)

    async def delete_provider(self, caller: Caller, provider_id: str) -> None:
        await self._get_owned(caller, provider_id, "delete")
        await self.repository.delete(provider_id)

        logger.info("Service provider deleted", provider_id=provider_id, user_id=caller.user_id)

    async def set_verification(self, admin: Caller, provider_id: str, verified: bool) -> Provider:
        if not await self.repository.set_verified(provider_id, verified):
            raise NotFoundError("Service provider not found", operation="verify_provider")

        logger.info(
            "Service provider verification updated",
            provider_id=provider_id,
            verified=verified,
            admin_id=admin.user_id,
        )
        return await self.get_provider(provider_id)


provider_service = ProviderService()
