from django.urls import path

from .views import OrderListView, ShopifyOrderWebhookView

urlpatterns = [
    path(
        "webhooks/orders/",
        ShopifyOrderWebhookView.as_view(),
        name="shopify_order_webhook",
    ),
    path(
        "orders/",
        OrderListView.as_view(),
        name="shopify_order_list",
    ),
]
