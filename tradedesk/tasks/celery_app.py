from celery import Celery

from tradedesk.core.config import get_settings

settings = get_settings()

celery_app = Celery(
    "tradedesk_tasks",
    broker=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/0",
    backend=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/0",
    include=["tradedesk.tasks.price_tasks"],
)

celery_app.conf.task_routes = {
    "tradedesk.tasks.price_tasks.*": {"queue": "price_queue"},
}

celery_app.conf.beat_schedule = {
    "tick-commodity-prices": {
        "task": "tradedesk.tasks.price_tasks.tick_prices",
        "schedule": float(settings.PRICE_TICK_SECONDS),
    },
}

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    broker_connection_retry_on_startup=True,
)
