"""Worker script to run the Celery worker together with the beat scheduler."""

from core.config import settings
from core.middleware.logging import setup_logging
from workers.celery_app import celery_app

setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

if __name__ == "__main__":
    celery_app.worker_main(
        argv=[
            "worker",
            "--beat",
            f"--loglevel={settings.log_level.lower()}",
            "--concurrency=1",
            "-Q",
            "default,maintenance",
        ]
    )
