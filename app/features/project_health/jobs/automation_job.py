"""
Project automation scheduler.

Runs ProjectAutomationService.run_once() on a fixed interval inside the
worker process.
"""

import asyncio

from app.config import settings
from app.core.errors import StoreError
from app.infrastructure.observability.logging import get_logger

from ..services.automation_service import project_automation_service

logger = get_logger(__name__)

ERROR_BACKOFF_SECONDS = 60


async def run_project_automation_job() -> dict:
    """Run a single automation cycle and return its summary."""
    report = await project_automation_service.run_once()
    return report.to_dict()


async def start_project_automation_scheduler() -> None:
    interval_minutes = settings.AUTOMATION_INTERVAL_MINUTES
    logger.info("Starting project automation scheduler", interval_minutes=interval_minutes)

    while True:
        try:
            metrics = await run_project_automation_job()

            if not metrics.get("skipped", False):
                logger.info("Project automation cycle finished", **metrics)

            await asyncio.sleep(interval_minutes * 60)

        except StoreError as e:
            logger.error(
                "Error in project automation scheduler",
                error=e.message,
                operation=e.operation,
            )
            await asyncio.sleep(ERROR_BACKOFF_SECONDS)
        except Exception as e:
            logger.error(
                "Unexpected error in project automation scheduler",
                error=str(e),
                error_type=type(e).__name__,
            )
            await asyncio.sleep(ERROR_BACKOFF_SECONDS)
