"""Timer trigger blueprint: scheduled entry point for the shared file fetch."""

import logging

import azure.functions as func

from onedrive_automation.config import load_config
from onedrive_automation.orchestration.fetcher import shared_file_fetcher_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.timer_trigger(
    schedule="0 0 6 * * *",
    arg_name="timer",
    run_on_startup=False,
)
def timer_trigger(timer: func.TimerRequest) -> None:
    """Scheduled trigger that downloads the configured shared file.

    Runs daily at 06:00 UTC. Any failure, including a missing item, is
    logged and re-raised so the run is reported as failed.
    """
    logger.info("Timer trigger fired")

    try:
        if timer.past_due:
            logger.warning("Timer trigger is past due")

        config = load_config()
        fetcher = shared_file_fetcher_from_config(config)
        result = fetcher.fetch()
        logger.info("Fetched %s (%d bytes) to %s", result.item.name, result.size, result.destination)

    except Exception:
        logger.exception("Timer trigger failed")
        raise
