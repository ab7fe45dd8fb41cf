"""
Celery Application Configuration

Configures Celery with Redis broker and result backend for per-employee
payroll fan-out.
"""

import os

from celery import Celery

# Broker and backend URLs
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", REDIS_URL)

app = Celery(
    "shiftpay",
    broker=REDIS_URL,
    backend=RESULT_BACKEND,
    include=["workers.tasks.payroll_tasks"],
)

app.conf.update(
    # Payloads are pydantic model dumps
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # One employee month per task; redeliver if a worker dies mid-task
    task_acks_late=True,
    worker_prefetch_multiplier=1,

    task_routes={
        "workers.tasks.payroll_tasks.*": {"queue": "payroll"},
    },
    worker_concurrency=int(os.getenv("WORKER_CONCURRENCY", "4")),
)

# Initialize Sentry for error monitoring in workers
_sentry_dsn = os.getenv("SENTRY_DSN", "")
if _sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.celery import CeleryIntegration

    sentry_sdk.init(
        dsn=_sentry_dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=f"shiftpay-worker@{os.getenv('APP_VERSION', '0.1.0')}",
        traces_sample_rate=0.1,
        integrations=[CeleryIntegration()],
    )
