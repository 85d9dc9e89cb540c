"""
Celery tasks for the green energy app.
"""
import logging

from celery import shared_task

from .services import GreenEnergyService

logger = logging.getLogger(__name__)


@shared_task
def mature_due_investments():
    """Mature green energy investments past their end date."""
    matured = GreenEnergyService().mature_due_investments()
    logger.info(f"Green energy maturity sweep finished: {matured} matured")
    return matured
