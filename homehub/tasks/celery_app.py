"""
Celery Application Configuration
"""

import os
from celery import Celery
from celery.schedules import crontab

# Get configuration from environment
# Use REDIS_URL if set, otherwise construct from CELERY_BROKER_URL or default
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", REDIS_URL)
# Run tasks inline (tests, local development without a worker)
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_TASK_ALWAYS_EAGER", "false").lower() in ("1", "true", "yes")

# Create Celery app
app = Celery(
    "homehub",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
    include=[
        "homehub.tasks.notifications",
        "homehub.tasks.maintenance",
    ],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=10 * 60,  # 10 minutes
    task_soft_time_limit=8 * 60,  # 8 minutes
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
    task_always_eager=CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,
)

# Configure periodic tasks with Celery Beat
app.conf.beat_schedule = {
    # Delete expired listing drafts (daily at 4 AM)
    "cleanup-expired-drafts-daily": {
        "task": "tasks.cleanup_expired_drafts",
        "schedule": crontab(hour=4, minute=0),
    },
}

if __name__ == "__main__":
    app.start()
