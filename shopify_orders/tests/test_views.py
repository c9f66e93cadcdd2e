"""Tests for the order webhook endpoint and the order list API."""

import base64
import hashlib
import hmac as hmac_mod
import json
import uuid
from unittest.mock import MagicMock, patch

import pytest
from rest_framework.test import APIClient

from shopify_orders.exceptions import ShopifyGraphQLError
from shopify_orders.models import Order, ShopifyShopConfig, WebhookLog
from shopify_orders.services.order_persistence import save_order
from shopify_orders.services.order_sync import OrderSyncService

from .factories import SHOP, remote_order

pytestmark = pytest.mark.django_db

WEBHOOK_SECRET = "test-webhook-secret"
WEBHOOK_URL = "/shopify/webhooks/orders/"
ORDERS_URL = "/shopify/orders/"
BUILD_SERVICE = "shopify_orders.handlers.orders.build_order_sync_service"


def _hmac_header(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    return base64.b64encode(
        hmac_mod.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    ).decode("utf-8")


def _post_webhook(client, payload, topic="orders/create", shop_domain=SHOP,
                  webhook_id=None, secret=WEBHOOK_SECRET):
    body = json.dumps(payload).encode("utf-8")
    if webhook_id is None:
        webhook_id = f"wh_{uuid.uuid4().hex[:12]}"
    return client.post(
        WEBHOOK_URL,
        data=body,
        content_type="application/json",
        HTTP_X_SHOPIFY_SHOP_DOMAIN=shop_domain,
        HTTP_X_SHOPIFY_HMAC_SHA256=_hmac_header(body, secret),
        HTTP_X_SHOPIFY_TOPIC=topic,
        HTTP_X_SHOPIFY_WEBHOOK_ID=webhook_id,
    )


def _mock_service(remote=None):
    """Service whose fetcher returns ``remote`` and saves through the real mapper."""
    fetcher = MagicMock()
    fetcher.fetch_one.return_value = remote
    return OrderSyncService(fetcher, sleep=lambda seconds: None)


class TestWebhookSecurity:
    def setup_method(self):
        self.client = APIClient()

    @pytest.mark.parametrize(
        "missing",
        ["HTTP_X_SHOPIFY_HMAC_SHA256", "HTTP_X_SHOPIFY_SHOP_DOMAIN", "HTTP_X_SHOPIFY_TOPIC"],
    )
    def test_missing_header_returns_400_without_verifying(self, missing):
        body = b'{"id": 1}'
        headers = {
            "HTTP_X_SHOPIFY_HMAC_SHA256": _hmac_header(body),
            "HTTP_X_SHOPIFY_SHOP_DOMAIN": SHOP,
            "HTTP_X_SHOPIFY_TOPIC": "orders/create",
        }
        del headers[missing]

        with patch("shopify_orders.views.verify_shopify_hmac") as verify:
            response = self.client.post(
                WEBHOOK_URL, data=body, content_type="application/json", **headers
            )

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required headers"}
        verify.assert_not_called()
        log = WebhookLog.objects.get()
        assert log.status == WebhookLog.Status.REJECTED
        assert log.processed is False

    def test_invalid_hmac_returns_401(self):
        body = b'{"id": 1}'
        with patch(BUILD_SERVICE) as build:
            response = self.client.post(
                WEBHOOK_URL,
                data=body,
                content_type="application/json",
                HTTP_X_SHOPIFY_SHOP_DOMAIN=SHOP,
                HTTP_X_SHOPIFY_HMAC_SHA256="invalid-hmac-value",
                HTTP_X_SHOPIFY_TOPIC="orders/create",
            )

        assert response.status_code == 401
        assert response.json() == {"error": "HMAC verification failed"}
        build.assert_not_called()
        log = WebhookLog.objects.get()
        assert log.status == WebhookLog.Status.REJECTED
        assert log.error == "HMAC verification failed"

    def test_wrong_secret_returns_401(self):
        response = _post_webhook(self.client, {"id": 1}, secret="wrong-secret")
        assert response.status_code == 401
        assert Order.objects.count() == 0

    def test_per_shop_secret_overrides_setting(self):
        ShopifyShopConfig.objects.create(
            shop_domain=SHOP, api_access_token="shpat_test", webhook_secret="shop-secret"
        )

        rejected = _post_webhook(
            self.client, {"id": 1}, topic="orders/fulfilled", secret=WEBHOOK_SECRET
        )
        accepted = _post_webhook(
            self.client, {"id": 1}, topic="orders/fulfilled", secret="shop-secret"
        )

        assert rejected.status_code == 401
        assert accepted.status_code == 200

    def test_empty_secret_skips_verification(self, settings):
        settings.SHOPIFY_WEBHOOK_SECRET = ""
        body = b'{"id": 1}'

        response = self.client.post(
            WEBHOOK_URL,
            data=body,
            content_type="application/json",
            HTTP_X_SHOPIFY_SHOP_DOMAIN=SHOP,
            HTTP_X_SHOPIFY_HMAC_SHA256="anything",
            HTTP_X_SHOPIFY_TOPIC="orders/fulfilled",
        )

        assert response.status_code == 200


class TestWebhookProcessing:
    def setup_method(self):
        self.client = APIClient()

    def test_order_create_saves_refetched_order(self):
        service = _mock_service(remote_order())
        with patch(BUILD_SERVICE, return_value=service) as build:
            response = _post_webhook(self.client, {"id": 450789469, "name": "#1001"})

        assert response.status_code == 200
        build.assert_called_once_with(SHOP)
        service.fetcher.fetch_one.assert_called_once_with("450789469")
        order = Order.objects.get()
        assert order.shopify_order_id == "450789469"
        assert order.line_items.count() == 1

        log = WebhookLog.objects.get()
        assert log.status == WebhookLog.Status.PROCESSED
        assert log.processed is True
        assert log.order_id == "450789469"
        assert log.topic == "orders/create"
        assert log.processed_at is not None

    def test_order_updated_overwrites_stored_order(self):
        save_order(remote_order(), SHOP)
        service = _mock_service(remote_order(financialStatus="REFUNDED"))

        with patch(BUILD_SERVICE, return_value=service):
            response = _post_webhook(
                self.client, {"id": 450789469}, topic="orders/updated"
            )

        assert response.status_code == 200
        assert Order.objects.count() == 1
        assert Order.objects.get().financial_status == "REFUNDED"

    def test_order_deleted_remotely_is_acknowledged(self):
        with patch(BUILD_SERVICE, return_value=_mock_service(None)):
            response = _post_webhook(self.client, {"id": 1})

        assert response.status_code == 200
        assert Order.objects.count() == 0
        assert WebhookLog.objects.get().processed is True

    def test_order_cancelled_updates_status(self):
        save_order(remote_order(), SHOP)

        with patch(BUILD_SERVICE) as build:
            response = _post_webhook(
                self.client,
                {"id": 450789469, "cancelled_at": "2024-03-02T08:30:00-05:00"},
                topic="orders/cancelled",
            )

        assert response.status_code == 200
        build.assert_not_called()
        order = Order.objects.get()
        assert order.financial_status == Order.FINANCIAL_STATUS_CANCELLED
        assert order.cancelled_at.isoformat() == "2024-03-02T13:30:00+00:00"

    def test_cancel_for_unknown_order_is_acknowledged(self):
        response = _post_webhook(self.client, {"id": 999}, topic="orders/cancelled")

        assert response.status_code == 200
        log = WebhookLog.objects.get()
        assert log.processed is True
        assert log.status == WebhookLog.Status.PROCESSED

    def test_order_fulfilled_updates_status(self):
        save_order(remote_order(), SHOP)

        response = _post_webhook(
            self.client, {"id": 450789469}, topic="orders/fulfilled"
        )

        assert response.status_code == 200
        assert (
            Order.objects.get().fulfillment_status
            == Order.FULFILLMENT_STATUS_FULFILLED
        )

    def test_unknown_topic_is_acknowledged_without_changes(self):
        save_order(remote_order(), SHOP)

        with patch(BUILD_SERVICE) as build:
            response = _post_webhook(
                self.client, {"id": 450789469}, topic="products/update"
            )

        assert response.status_code == 200
        build.assert_not_called()
        assert Order.objects.get().financial_status == "PAID"
        assert WebhookLog.objects.get().processed is True

    def test_handler_failure_returns_500_and_logs_error(self):
        service = MagicMock()
        service.sync_one.side_effect = ShopifyGraphQLError(
            "Throttled", code="THROTTLED"
        )
        with patch(BUILD_SERVICE, return_value=service):
            response = _post_webhook(self.client, {"id": 450789469})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        log = WebhookLog.objects.get()
        assert log.status == WebhookLog.Status.FAILED
        assert log.processed is False
        assert log.error == "Throttled"
        assert log.processed_at is not None

    def test_missing_order_id_returns_500(self):
        response = _post_webhook(self.client, {"name": "#1001"}, topic="orders/fulfilled")

        assert response.status_code == 500
        assert "Missing order id" in WebhookLog.objects.get().error

    def test_processed_webhook_is_not_reprocessed(self):
        service = _mock_service(remote_order())
        with patch(BUILD_SERVICE, return_value=service) as build:
            first = _post_webhook(self.client, {"id": 450789469}, webhook_id="wh_dup")
            second = _post_webhook(self.client, {"id": 450789469}, webhook_id="wh_dup")

        assert first.status_code == 200
        assert second.status_code == 200
        build.assert_called_once()
        assert WebhookLog.objects.filter(webhook_id="wh_dup").count() == 1

    def test_failed_webhook_is_reprocessed_on_redelivery(self):
        failing = MagicMock()
        failing.sync_one.side_effect = RuntimeError("boom")
        with patch(BUILD_SERVICE, side_effect=[failing, _mock_service(remote_order())]):
            first = _post_webhook(self.client, {"id": 450789469}, webhook_id="wh_retry")
            second = _post_webhook(self.client, {"id": 450789469}, webhook_id="wh_retry")

        assert first.status_code == 500
        assert second.status_code == 200
        assert Order.objects.count() == 1
        assert list(
            WebhookLog.objects.filter(webhook_id="wh_retry")
            .order_by("id")
            .values_list("status", flat=True)
        ) == [WebhookLog.Status.FAILED, WebhookLog.Status.PROCESSED]


class TestOrderListView:
    def setup_method(self):
        self.client = APIClient()

    def test_requires_shop(self):
        response = self.client.get(ORDERS_URL)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing shop parameter"}

    def test_lists_orders_with_pagination(self):
        for number in range(1, 4):
            save_order(
                remote_order(
                    order_id=str(number),
                    name=f"#100{number}",
                    createdAt=f"2024-03-0{number}T12:00:00Z",
                ),
                SHOP,
            )

        response = self.client.get(
            ORDERS_URL, {"shop": SHOP, "limit": 2, "sortBy": "createdAt"}
        )

        assert response.status_code == 200
        data = response.json()
        assert [order["name"] for order in data["orders"]] == ["#1003", "#1002"]
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        first = data["orders"][0]
        assert first["total_price"] == "409.940"
        assert first["tags"] == ["wholesale", "priority"]
        assert first["customer"]["first_name"] == "Bob"
        assert first["line_items"][0]["title"] == "IPod Nano - 8GB"

    def test_filters_by_status(self):
        save_order(remote_order(order_id="1"), SHOP)
        save_order(remote_order(order_id="2", financialStatus="REFUNDED"), SHOP)

        response = self.client.get(ORDERS_URL, {"shop": SHOP, "status": "REFUNDED"})

        data = response.json()
        assert data["pagination"]["total"] == 1
        assert data["orders"][0]["shopify_order_id"] == "2"
