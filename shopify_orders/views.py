import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .middleware import verify_shopify_hmac
from .models import ShopifyShopConfig, WebhookLog
from .services.order_queries import DEFAULT_PAGE_SIZE, DEFAULT_SORT_FIELD, list_orders
from .tasks import process_webhook_log

logger = logging.getLogger(__name__)


def get_webhook_secret(shop_domain):
    """Return the secret used to verify webhooks from ``shop_domain``.

    A per-shop secret on ShopifyShopConfig wins over the
    ``SHOPIFY_WEBHOOK_SECRET`` setting. An empty result disables
    verification.
    """
    config = (
        ShopifyShopConfig.objects.filter(shop_domain=shop_domain, is_active=True)
        .only("webhook_secret")
        .first()
    )
    if config is not None and config.webhook_secret:
        return config.webhook_secret
    return getattr(settings, "SHOPIFY_WEBHOOK_SECRET", "")


class ShopifyOrderWebhookView(APIView):
    """Receives orders/create, orders/updated, orders/cancelled and
    orders/fulfilled webhooks.

    Checks the required headers and the HMAC signature, skips deliveries
    that were already processed, records a WebhookLog and processes the
    event in-request so that failures reach Shopify as a 500 and are
    redelivered.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        raw_body = request.body
        hmac_header = request.META.get("HTTP_X_SHOPIFY_HMAC_SHA256", "")
        shop_domain = request.META.get("HTTP_X_SHOPIFY_SHOP_DOMAIN", "")
        topic = request.META.get("HTTP_X_SHOPIFY_TOPIC", "")
        webhook_id = request.META.get("HTTP_X_SHOPIFY_WEBHOOK_ID", "")

        # 1. Required headers
        if not (hmac_header and shop_domain and topic):
            logger.error(
                "Missing required webhook headers (shop=%s, topic=%s)", shop_domain, topic
            )
            self._record_rejection(
                raw_body, shop_domain, topic, webhook_id, "Missing required headers"
            )
            return Response(
                {"error": "Missing required headers"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        # 2. Verify HMAC signature
        if not verify_shopify_hmac(raw_body, hmac_header, get_webhook_secret(shop_domain)):
            logger.warning("HMAC verification failed for %s", shop_domain)
            self._record_rejection(
                raw_body, shop_domain, topic, webhook_id, "HMAC verification failed"
            )
            return Response(
                {"error": "HMAC verification failed"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        # 3. Replayed delivery that was already processed
        if (
            webhook_id
            and WebhookLog.objects.filter(webhook_id=webhook_id, processed=True).exists()
        ):
            logger.info("Skipping already processed webhook %s (%s)", webhook_id, topic)
            return Response(status=status.HTTP_200_OK)

        # 4. Record and process
        log = WebhookLog.objects.create(
            webhook_id=webhook_id,
            topic=topic,
            shop_domain=shop_domain,
            payload=raw_body.decode("utf-8", errors="replace"),
            status=WebhookLog.Status.VERIFIED,
        )
        logger.info("Received webhook: %s from %s", topic, shop_domain)

        try:
            process_webhook_log(log)
        except Exception:
            return Response(
                {"error": "Internal Server Error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        logger.info("Successfully processed webhook: %s", topic)
        return Response(status=status.HTTP_200_OK)

    @staticmethod
    def _record_rejection(raw_body, shop_domain, topic, webhook_id, reason):
        WebhookLog.objects.create(
            webhook_id=webhook_id,
            topic=topic,
            shop_domain=shop_domain,
            payload=raw_body.decode("utf-8", errors="replace"),
            status=WebhookLog.Status.REJECTED,
            error=reason,
        )


class OrderListView(APIView):
    """Paginated, filterable list of the orders stored for one shop."""

    def get(self, request):
        params = request.query_params
        shop = params.get("shop")
        if not shop:
            return Response(
                {"error": "Missing shop parameter"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        result = list_orders(
            shop,
            page=params.get("page", 1),
            limit=params.get("limit", DEFAULT_PAGE_SIZE),
            search=params.get("search") or None,
            status=params.get("status") or None,
            sort_by=params.get("sortBy", DEFAULT_SORT_FIELD),
            sort_order=params.get("sortOrder", "desc"),
        )
        return Response(result)
