# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# reminder dispatch and push notifications.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (reminder scan, push relay)
# - config.py: Worker-specific settings and the beat schedule
#
# Usage:
#   celery -A workers.celery_app worker --loglevel=info
#   celery -A workers.celery_app beat --loglevel=info
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
