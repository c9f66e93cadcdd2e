"""Order sync orchestration: full catalogue sync and incremental updates.

Full sync (:meth:`OrderSyncService.sync_all`) pulls every order through the
:class:`~shopify_orders.services.order_fetcher.OrderFetcher` and saves them
one at a time. Incremental updates come from webhooks: create/update events
re-fetch the order (:meth:`OrderSyncService.sync_one`), while cancellation
and fulfilment events only touch status columns of the local row.

Usage::

    from shopify_orders.services.order_sync import build_order_sync_service

    service = build_order_sync_service("my-shop.myshopify.com")
    result = service.sync_all("my-shop.myshopify.com")
"""

import logging
import time

from django.utils import timezone

from ..exceptions import ShopNotConfigured
from ..models import Order, ShopifyShopConfig
from .order_fetcher import OrderFetcher, notify_progress
from .order_persistence import save_order
from .shopify_client import ShopifyGraphQLClient

logger = logging.getLogger(__name__)

PACING_INTERVAL = 10  # orders between local-store pacing delays
PACING_DELAY = 0.1  # seconds


def mark_order_cancelled(remote_order_id, shop, cancelled_at=None):
    """Flag the local order as cancelled without refetching it.

    Returns:
        int: number of rows updated; 0 when the order is not stored locally.
    """
    now = timezone.now()
    updated = Order.objects.filter(
        shopify_order_id=str(remote_order_id), shop=shop
    ).update(
        financial_status=Order.FINANCIAL_STATUS_CANCELLED,
        cancelled_at=cancelled_at or now,
        updated_at=now,
    )
    logger.info(
        "Marked order %s as cancelled for %s (%d rows)", remote_order_id, shop, updated
    )
    return updated


def mark_order_fulfilled(remote_order_id, shop):
    """Flag the local order as fulfilled without refetching it.

    Returns:
        int: number of rows updated; 0 when the order is not stored locally.
    """
    updated = Order.objects.filter(
        shopify_order_id=str(remote_order_id), shop=shop
    ).update(
        fulfillment_status=Order.FULFILLMENT_STATUS_FULFILLED,
        updated_at=timezone.now(),
    )
    logger.info(
        "Marked order %s as fulfilled for %s (%d rows)", remote_order_id, shop, updated
    )
    return updated


class OrderSyncService:
    """Drives order synchronisation for one shop connection.

    Args:
        fetcher: :class:`OrderFetcher` bound to the shop's API client.
        save: Persistence callable ``save(remote_order, shop)``.
        sleep: Called for the pacing delay between batches of saves.
    """

    def __init__(self, fetcher, save=save_order, sleep=time.sleep):
        self.fetcher = fetcher
        self.save = save
        self.sleep = sleep

    def sync_all(self, shop, on_progress=None):
        """Fetch every order and persist each one sequentially.

        A failure while saving one order is logged and counted; the
        remaining orders are still processed. Failures of the fetch itself
        propagate.

        Args:
            shop: Shop domain.
            on_progress: Optional ``callable(current, total)``. Called with
                ``(fetched, None)`` after each page, then ``(saved, total)``
                after each saved order. Advisory only.

        Returns:
            dict: ``{"success": int, "errors": int}``
        """
        logger.info("Starting order synchronization for %s", shop)
        orders = self.fetcher.fetch_all(
            shop,
            on_progress=lambda fetched: notify_progress(on_progress, fetched, None),
        )
        total = len(orders)
        logger.info("Processing %d orders for %s", total, shop)

        success_count = 0
        error_count = 0
        for index, remote_order in enumerate(orders, start=1):
            try:
                self.save(remote_order, shop)
            except Exception:
                error_count += 1
                logger.exception(
                    "Error processing order %s for %s",
                    remote_order.get("name") or remote_order.get("id"),
                    shop,
                )
            else:
                success_count += 1
                notify_progress(on_progress, index, total)

            if index % PACING_INTERVAL == 0:
                self.sleep(PACING_DELAY)

        logger.info(
            "Synchronization complete for %s. Success: %d, Errors: %d",
            shop,
            success_count,
            error_count,
        )
        return {"success": success_count, "errors": error_count}

    def sync_one(self, remote_order_id, shop):
        """Refetch one order and save it. A missing remote order is a no-op.

        Returns:
            The saved :class:`~shopify_orders.models.Order`, or ``None``.
        """
        remote_order = self.fetcher.fetch_one(remote_order_id)
        if remote_order is None:
            logger.info(
                "Order %s not found on Shopify for %s, nothing to sync",
                remote_order_id,
                shop,
            )
            return None
        return self.save(remote_order, shop)

    def cancel(self, remote_order_id, shop, cancelled_at=None):
        return mark_order_cancelled(remote_order_id, shop, cancelled_at=cancelled_at)

    def fulfill(self, remote_order_id, shop):
        return mark_order_fulfilled(remote_order_id, shop)


def get_shop_config(shop_domain):
    """Return the active :class:`ShopifyShopConfig` for ``shop_domain``.

    Raises:
        ShopNotConfigured: no active configuration exists.
    """
    try:
        return ShopifyShopConfig.objects.get(shop_domain=shop_domain, is_active=True)
    except ShopifyShopConfig.DoesNotExist:
        raise ShopNotConfigured(f"No active ShopifyShopConfig for {shop_domain}")


def build_order_sync_service(shop_domain, session=None, sleep=time.sleep):
    """Build the client → fetcher → service chain for one shop."""
    config = get_shop_config(shop_domain)
    client = ShopifyGraphQLClient.from_config(config, session=session)
    return OrderSyncService(OrderFetcher(client, sleep=sleep), sleep=sleep)
