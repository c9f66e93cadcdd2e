import json
import logging
import time

import dramatiq
from datadog import statsd
from django.utils import timezone
from requests.exceptions import ConnectionError, Timeout

from .exceptions import ShopifyGraphQLError
from .models import WebhookLog
from .router import OrderEvent, get_handler
from .services.order_sync import build_order_sync_service
from .services.shopify_client import RETRYABLE_ERROR_CODES

logger = logging.getLogger(__name__)

SHOPIFY_ORDERS_QUEUE = "shopify_orders"


def should_retry(retries_so_far, exception):
    """Return True for transient errors, False for permanent ones.

    Transient (retry): ConnectionError, Timeout, Shopify throttling or
    internal errors (after the fetcher's own retries are exhausted),
    HTTP 5xx, HTTP 429.
    Permanent (fail):  ValueError, KeyError, HTTP 4xx (except 429), etc.
    """
    if isinstance(exception, ShopifyGraphQLError):
        return exception.code in RETRYABLE_ERROR_CODES
    # HTTPError is an OSError too, so the status decides before the type does.
    if getattr(exception, "response", None) is not None:
        status_code = exception.response.status_code
        return status_code == 429 or 500 <= status_code < 600
    if isinstance(exception, (ConnectionError, Timeout, OSError)):
        return True
    return False


def process_webhook_log(log):
    """Process a verified order webhook synchronously.

    Transitions the log to processing, dispatches the payload to the handler
    registered for its event, and records the outcome. Failures are stored
    on the log and re-raised so the caller can answer with an error status;
    Shopify redelivers failed webhooks on its own schedule.
    """
    event = OrderEvent.from_topic(log.topic)
    log.status = WebhookLog.Status.PROCESSING
    log.save(update_fields=["status", "updated_at"])

    tags = [
        f"topic:{log.topic}",
        f"shop_domain:{log.shop_domain}",
        f"strategy:{event.strategy.value}",
    ]
    statsd.increment("shopify.orders.webhook.received", tags=tags)

    start = time.monotonic()
    try:
        payload = json.loads(log.payload)
        if isinstance(payload, dict) and payload.get("id") is not None:
            log.order_id = str(payload["id"])
        handler = get_handler(event)
        handler(log, payload)
        log.status = WebhookLog.Status.PROCESSED
        log.processed = True
    except Exception as exc:
        log.status = WebhookLog.Status.FAILED
        log.error = str(exc)[:2000] or exc.__class__.__name__
        logger.exception(
            "Failed to process webhook log %s (topic=%s)",
            log.id,
            log.topic,
        )
        raise
    finally:
        log.processed_at = timezone.now()
        log.processing_time_ms = int((time.monotonic() - start) * 1000)
        log.save(
            update_fields=[
                "status",
                "processed",
                "order_id",
                "error",
                "processed_at",
                "processing_time_ms",
                "updated_at",
            ]
        )
        result_tags = tags + [f"status:{log.status}"]
        if log.status == WebhookLog.Status.PROCESSED:
            statsd.increment("shopify.orders.webhook.processed", tags=result_tags)
        else:
            statsd.increment("shopify.orders.webhook.failed", tags=result_tags)
        statsd.histogram(
            "shopify.orders.webhook.processing_time_ms",
            log.processing_time_ms,
            tags=result_tags,
        )


@dramatiq.actor(
    queue_name=SHOPIFY_ORDERS_QUEUE,
    max_retries=3,
    min_backoff=30_000,
    max_backoff=600_000,
    retry_when=should_retry,
    time_limit=3_600_000,
)
def sync_shop_orders(shop_domain):
    """Run a full order sync for one shop in the background."""
    tags = [f"shop_domain:{shop_domain}"]
    start = time.monotonic()
    service = build_order_sync_service(shop_domain)
    result = service.sync_all(shop_domain)

    statsd.increment("shopify.orders.sync.success", result["success"], tags=tags)
    statsd.increment("shopify.orders.sync.errors", result["errors"], tags=tags)
    statsd.histogram(
        "shopify.orders.sync.duration_ms",
        int((time.monotonic() - start) * 1000),
        tags=tags,
    )
    return result
