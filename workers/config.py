# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers.
# =============================================================================

from app.config import settings


class CeleryConfig:
    """
    Celery configuration settings.

    These are applied to the Celery app via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker Settings (Redis)
    # -------------------------------------------------------------------------

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # -------------------------------------------------------------------------
    # Task Settings
    # -------------------------------------------------------------------------

    # Acknowledge tasks after they complete (not before)
    task_acks_late = True

    # Only prefetch one task at a time
    worker_prefetch_multiplier = 1

    # Task results expire after 1 hour
    result_expires = 3600

    # A reminder scan must finish well before the next one starts
    task_time_limit = 120
    task_soft_time_limit = 90

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Task Routing
    # -------------------------------------------------------------------------

    task_queues = {
        "default": {
            "exchange": "default",
            "routing_key": "default",
        },
        "notifications": {
            "exchange": "notifications",
            "routing_key": "notifications",
        },
    }

    task_routes = {
        "workers.tasks.send_push_notification": {"queue": "notifications"},
    }

    task_default_queue = "default"

    # -------------------------------------------------------------------------
    # Periodic Tasks (celery beat)
    # -------------------------------------------------------------------------

    beat_schedule = {
        "dispatch-due-reminders": {
            "task": "workers.tasks.dispatch_due_reminders",
            "schedule": float(settings.REMINDER_SCAN_INTERVAL_SECONDS),
        },
    }

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    worker_send_task_events = True
    task_send_sent_event = True

    # -------------------------------------------------------------------------
    # Timezone
    # -------------------------------------------------------------------------

    timezone = "UTC"
    enable_utc = True
