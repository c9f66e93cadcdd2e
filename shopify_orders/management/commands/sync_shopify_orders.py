"""
Synchronize every Shopify order of a shop into the local store.

Usage:
    python manage.py sync_shopify_orders --shop my-shop.myshopify.com

    # Hand the sync to the Dramatiq worker instead of running it inline
    python manage.py sync_shopify_orders --shop my-shop.myshopify.com --background
"""

from django.core.management.base import BaseCommand, CommandError

from shopify_orders.exceptions import ShopNotConfigured
from shopify_orders.services.order_sync import build_order_sync_service
from shopify_orders.tasks import sync_shop_orders


class Command(BaseCommand):
    help = "Synchronize all Shopify orders of a shop into the local database"

    def add_arguments(self, parser):
        parser.add_argument(
            "--shop",
            type=str,
            required=True,
            help="The shop domain (ShopifyShopConfig.shop_domain).",
        )
        parser.add_argument(
            "--background",
            action="store_true",
            help="Enqueue the sync on the Dramatiq queue and return immediately.",
        )

    def handle(self, *args, **options):
        shop = options["shop"]

        if options["background"]:
            sync_shop_orders.send(shop)
            self.stdout.write(f"Queued order sync for {shop}")
            return

        try:
            service = build_order_sync_service(shop)
        except ShopNotConfigured as exc:
            raise CommandError(str(exc))

        result = service.sync_all(shop, on_progress=self._progress)
        self.stdout.write(
            f"\nSync completed! Successfully processed {result['success']} orders. "
            f"{result['errors']} errors."
        )

    def _progress(self, current, total):
        if total is None:
            self.stdout.write(f"  fetched {current} orders")
        elif current % 50 == 0 or current == total:
            self.stdout.write(f"  saved {current}/{total}")
