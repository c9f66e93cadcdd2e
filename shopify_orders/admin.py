from django.contrib import admin

from .models import Customer, LineItem, Order, ShopifyShopConfig, WebhookLog


@admin.register(ShopifyShopConfig)
class ShopifyShopConfigAdmin(admin.ModelAdmin):
    list_display = (
        "shop_domain",
        "api_version",
        "is_active",
        "updated_at",
    )
    list_filter = ("is_active",)
    search_fields = ("shop_domain",)
    readonly_fields = ("created_at", "updated_at")


class LineItemInline(admin.TabularInline):
    model = LineItem
    extra = 0
    readonly_fields = (
        "shopify_line_item_id",
        "title",
        "variant_title",
        "sku",
        "quantity",
        "price",
        "total_discount",
        "fulfillment_status",
    )
    fields = readonly_fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "shop",
        "email",
        "total_price",
        "currency",
        "financial_status",
        "fulfillment_status",
        "created_at",
    )
    list_filter = (
        "shop",
        "financial_status",
        "fulfillment_status",
        "test",
    )
    search_fields = (
        "name",
        "email",
        "shopify_order_id",
        "customer__first_name",
        "customer__last_name",
    )
    raw_id_fields = ("customer", "shipping_address", "billing_address")
    readonly_fields = ("synced_at",)
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    inlines = [LineItemInline]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = (
        "shopify_customer_id",
        "first_name",
        "last_name",
        "email",
        "orders_count",
        "total_spent",
        "shop",
    )
    list_filter = ("shop",)
    search_fields = ("shopify_customer_id", "email", "first_name", "last_name")


@admin.register(WebhookLog)
class WebhookLogAdmin(admin.ModelAdmin):
    list_display = (
        "topic",
        "shop_domain",
        "status",
        "processed",
        "order_id",
        "processing_time_ms",
        "created_at",
    )
    list_filter = (
        "status",
        "processed",
        "topic",
    )
    search_fields = (
        "webhook_id",
        "shop_domain",
        "order_id",
    )
    readonly_fields = ("payload", "processing_time_ms", "processed_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
