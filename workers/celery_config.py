"""Celery configuration for scheduled maintenance tasks."""

from celery.schedules import crontab
from kombu import Exchange, Queue

from core.config import settings

# Broker configuration (Redis)
broker_url = settings.celery_broker_url
result_backend = settings.celery_result_backend

# Task modules loaded by workers
imports = ("workers.tasks.jobs",)

# Task routing and serialization
task_serializer = "json"
accept_content = ["json"]
result_serializer = "json"
timezone = "UTC"
enable_utc = True

# Task execution settings
task_track_started = True
task_time_limit = 5 * 60  # 5 minutes hard limit
task_soft_time_limit = 4 * 60  # 4 minutes soft limit

# Worker settings
worker_prefetch_multiplier = 1
worker_max_tasks_per_child = 1000

# Queue configuration with routing
default_exchange = Exchange("hireboard", type="direct")
task_default_queue = "default"
task_queues = (
    Queue("default", exchange=default_exchange, routing_key="default"),
    Queue("maintenance", exchange=default_exchange, routing_key="maintenance"),
)

# Task routing
task_routes = {
    "workers.tasks.jobs.*": {"queue": "maintenance"},
}

# Periodic tasks, run by `celery beat`
beat_schedule = {
    "close-expired-jobs": {
        "task": "workers.tasks.jobs.trigger_job_status_sweep",
        # Shortly after UTC midnight, once yesterday's deadlines have passed
        "schedule": crontab(hour=0, minute=5),
    },
}

# Result backend settings
result_expires = 3600  # Results expire after 1 hour
