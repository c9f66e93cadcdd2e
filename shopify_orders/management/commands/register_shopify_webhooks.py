"""
Register the Shopify order webhook subscriptions for a shop.

Usage:
    python manage.py register_shopify_webhooks \
        --shop my-shop.myshopify.com --base-url https://app.example.com

--base-url defaults to settings.SHOPIFY_APP_URL.
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.urls import reverse

from shopify_orders.exceptions import ShopNotConfigured
from shopify_orders.services.order_sync import get_shop_config
from shopify_orders.services.webhook_registration import register_order_webhooks


class Command(BaseCommand):
    help = "Register Shopify order webhook subscriptions for a shop"

    def add_arguments(self, parser):
        parser.add_argument(
            "--shop",
            type=str,
            required=True,
            help="The shop domain (ShopifyShopConfig.shop_domain).",
        )
        parser.add_argument(
            "--base-url",
            type=str,
            default="",
            help="Public base URL for webhook callbacks (e.g. https://app.example.com).",
        )

    def handle(self, *args, **options):
        try:
            config = get_shop_config(options["shop"])
        except ShopNotConfigured as exc:
            raise CommandError(str(exc))

        base_url = options["base_url"] or getattr(settings, "SHOPIFY_APP_URL", "")
        if not base_url:
            raise CommandError(
                "--base-url is required when SHOPIFY_APP_URL is not set."
            )

        callback_url = base_url.rstrip("/") + reverse("shopify_order_webhook")
        report = register_order_webhooks(config, callback_url)

        for result in report["results"]:
            if result["success"]:
                self.stdout.write(
                    f"  SUCCESS: {result['topic']} → {callback_url} "
                    f"(id={result.get('id', '?')})"
                )
            else:
                self.stdout.write(
                    f"  FAILED: {result['topic']}: {result['error']}"
                )

        self.stdout.write(
            f"\nDone: {report['message']} (shop={config.shop_domain})"
        )
