import logging
from celery import shared_task
from flask import has_app_context
from sqlalchemy.exc import SQLAlchemyError
from models import utcnow
from app.services import lifecycle
from app.utils.db import transactional

logger = logging.getLogger(__name__)


def _reconcile() -> dict:
    with transactional("Failed to reconcile customer statuses"):
        counts = lifecycle.reconcile_all(utcnow())
    logger.info({"event": "status_sweep", "transitions": counts})
    return counts


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def reconcile_account_statuses_task(self) -> dict:
    """Persist expired suspensions and inactivity for all customers."""
    try:
        if has_app_context():
            return _reconcile()

        from app import create_app
        app = create_app()
        with app.app_context():
            return _reconcile()
    except SQLAlchemyError as exc:
        raise self.retry(exc=exc)
