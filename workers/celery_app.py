# =============================================================================
# workers/celery_app.py - Reminder Worker Application
# =============================================================================
# The Celery app that delivers medication reminders. Two processes run it:
#
#   # Scheduler: enqueues dispatch_due_reminders every
#   # REMINDER_SCAN_INTERVAL_SECONDS
#   celery -A workers.celery_app beat --loglevel=info
#
#   # Worker: runs the scan and the push deliveries it queues
#   celery -A workers.celery_app worker -Q default,notifications --loglevel=info
#
# Broker and result backend both come from settings.REDIS_URL.
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_retry

from app.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def redacted_broker_url(url: str) -> str:
    """Broker URL with any credentials stripped, for logging."""
    scheme, _, rest = url.partition("://")
    return f"{scheme}://{rest.split('@')[-1]}" if rest else url


def create_celery_app() -> Celery:
    """
    Build the reminder worker app from settings.

    Routing, the beat schedule and time limits live in workers.config.
    """
    app = Celery(
        "medichecker_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )
    app.config_from_object("workers.config:CeleryConfig")

    logger.info(
        f"Reminder worker using {redacted_broker_url(settings.REDIS_URL)}, "
        f"scan every {settings.REMINDER_SCAN_INTERVAL_SECONDS}s"
    )
    return app


celery_app = create_celery_app()


# =============================================================================
# Task Signals
# =============================================================================

@task_postrun.connect
def log_reminder_scan(sender=None, task_id=None, task=None, retval=None, state=None, **extra):
    """Log the counts each reminder scan returns."""
    if task is not None and task.name == "workers.tasks.dispatch_due_reminders" and isinstance(retval, dict):
        logger.info(
            f"Reminder scan [{task_id}] {state}: {retval.get('dispatched', 0)} dispatched, "
            f"{retval.get('pushed', 0)} pushed, {retval.get('failed', 0)} failed"
        )


@task_retry.connect
def log_push_retry(sender=None, request=None, reason=None, **extra):
    """Log a push delivery being retried."""
    logger.warning(f"Retrying {sender.name if sender else 'task'}: {reason}")


@task_failure.connect
def log_task_failure(sender=None, task_id=None, exception=None, **extra):
    """Log a task that gave up."""
    logger.error(f"Task failed: {sender.name} [{task_id}] - Error: {exception}")


if __name__ == "__main__":
    celery_app.start()
