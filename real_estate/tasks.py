"""
Celery tasks for the real estate app.
"""
import logging

from celery import shared_task

from .services import RealEstateAdminService

logger = logging.getLogger(__name__)


@shared_task
def mature_due_investments():
    """Mark real estate investments past their end date as matured."""
    matured = RealEstateAdminService().mature_due_investments()
    logger.info(f"Real estate maturity sweep finished: {matured} matured")
    return matured
