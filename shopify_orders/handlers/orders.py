import logging

from django.utils.dateparse import parse_datetime

from ..exceptions import OrderPayloadError
from ..router import OrderEvent, register_handler
from ..services.order_sync import (
    build_order_sync_service,
    mark_order_cancelled,
    mark_order_fulfilled,
)

logger = logging.getLogger(__name__)


def _order_id(payload):
    """Return the numeric order id carried by an order webhook payload."""
    order_id = payload.get("id") if isinstance(payload, dict) else None
    if order_id in (None, ""):
        raise OrderPayloadError("Missing order id in webhook payload")
    return str(order_id)


def handle_order_upsert(log, payload):
    """Handle orders/create and orders/updated: refetch and save the order.

    The webhook body is the REST representation of the order; the full
    GraphQL representation (customer, addresses, line items) is fetched
    again so that every save goes through the same persistence mapper.
    """
    order_id = _order_id(payload)
    service = build_order_sync_service(log.shop_domain)
    order = service.sync_one(order_id, log.shop_domain)
    logger.info(
        "Order %s synced from %s webhook (shop=%s, stored=%s)",
        payload.get("name") or order_id,
        log.topic,
        log.shop_domain,
        order is not None,
    )


def handle_order_cancelled(log, payload):
    """Handle orders/cancelled: mark the stored order as cancelled."""
    order_id = _order_id(payload)
    cancelled_at = parse_datetime(payload.get("cancelled_at") or "")
    mark_order_cancelled(order_id, log.shop_domain, cancelled_at=cancelled_at)


def handle_order_fulfilled(log, payload):
    """Handle orders/fulfilled: mark the stored order as fulfilled."""
    order_id = _order_id(payload)
    mark_order_fulfilled(order_id, log.shop_domain)


def handle_unrecognized(log, payload):
    """Acknowledge a topic this app does not act on."""
    logger.info(
        "Ignoring webhook topic %s from %s", log.topic, log.shop_domain
    )


# ---------------------------------------------------------------------------
# Handler registration, run when this module is imported via apps.ready()
# ---------------------------------------------------------------------------
register_handler(OrderEvent.CREATED, handle_order_upsert)
register_handler(OrderEvent.UPDATED, handle_order_upsert)
register_handler(OrderEvent.CANCELLED, handle_order_cancelled)
register_handler(OrderEvent.FULFILLED, handle_order_fulfilled)
register_handler(OrderEvent.UNRECOGNIZED, handle_unrecognized)
