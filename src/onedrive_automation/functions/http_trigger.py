"""HTTP trigger blueprint: health check and manual fetch endpoints."""

import json
import logging

import azure.functions as func

from onedrive_automation import __version__
from onedrive_automation.config import load_config
from onedrive_automation.orchestration.fetcher import (
    ItemNotFoundError,
    shared_file_fetcher_from_config,
)

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Liveness check for the shared file fetcher.

    Reports the package version only; it does not contact Graph or the
    identity provider, so it stays green when credentials are broken.
    """
    logger.info("[health_check] health check requested")

    try:
        body = json.dumps({"status": "ok", "version": __version__})
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        error_body = json.dumps({"status": "error", "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")


@bp.route(route="fetch", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def manual_fetch(req: func.HttpRequest) -> func.HttpResponse:
    """Manual trigger endpoint: runs the shared file fetch on demand.

    Requires a function key. Executes the same job as the timer trigger and
    reports the outcome; a missing item yields 404 with "Item not found!".
    """
    logger.info("[manual_fetch] manual fetch requested")

    try:
        config = load_config()
        fetcher = shared_file_fetcher_from_config(config)
        result = fetcher.fetch()

        body = json.dumps(
            {
                "status": "ok",
                "name": result.item.name,
                "bytes": result.size,
                "destination": result.destination,
            }
        )
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except ItemNotFoundError as exc:
        logger.warning("[manual_fetch] %s", exc)
        error_body = json.dumps({"status": "error", "message": str(exc)})
        return func.HttpResponse(error_body, status_code=404, mimetype="application/json")

    except Exception:
        logger.error("[manual_fetch] manual fetch failed", exc_info=True)
        error_body = json.dumps({"status": "error", "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")
