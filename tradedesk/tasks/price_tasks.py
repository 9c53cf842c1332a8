import random
from typing import Optional

from tradedesk.core.database import timed_session
from tradedesk.core.logging import setup_logger
from tradedesk.services.price_feed_service import PriceFeedService
from tradedesk.tasks.celery_app import celery_app

logger = setup_logger("tradedesk.tasks.price_tasks")


@celery_app.task(name="tradedesk.tasks.price_tasks.tick_prices")
def tick_prices(seed: Optional[int] = None) -> dict:
    """
    Moves every commodity price one step of the random walk.

    Args:
        seed: Optional seed for a reproducible run

    Returns:
        dict: Number of commodities updated and failed
    """
    logger.info("Running scheduled price tick")
    with timed_session() as db:
        result = PriceFeedService(db).tick(random.Random(seed))
    return result.model_dump()
