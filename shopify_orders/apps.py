from django.apps import AppConfig


class ShopifyOrdersConfig(AppConfig):
    name = "shopify_orders"
    verbose_name = "Shopify Orders"
    default_auto_field = "django.db.models.AutoField"

    def ready(self):
        # Import handler modules to trigger event registration in router.
        import shopify_orders.handlers.orders  # noqa: F401
