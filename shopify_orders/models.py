from django.db import models

from .utils import split_tags


class ShopifyShopConfig(models.Model):
    """Per-tenant Shopify connection configuration. One record per shop."""

    shop_domain = models.CharField(max_length=255, unique=True)
    api_access_token = models.TextField()
    webhook_secret = models.CharField(max_length=255, blank=True, default="")
    api_version = models.CharField(max_length=10, default="2024-07")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shopify_shop_config"

    def __str__(self):
        return self.shop_domain


class Customer(models.Model):
    shop = models.CharField(max_length=255, db_index=True)
    shopify_customer_id = models.CharField(max_length=64)
    email = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=64, blank=True, null=True)
    first_name = models.CharField(max_length=255, blank=True, null=True)
    last_name = models.CharField(max_length=255, blank=True, null=True)
    orders_count = models.IntegerField(default=0)
    total_spent = models.DecimalField(max_digits=15, decimal_places=3, default=0)
    total_spent_currency = models.CharField(max_length=3, blank=True, default="")
    tags = models.TextField(blank=True, default="")
    note = models.TextField(blank=True, null=True)
    verified_email = models.BooleanField(default=False)
    tax_exempt = models.BooleanField(default=False)
    # Remote lifecycle timestamps.
    created_at = models.DateTimeField(null=True)
    updated_at = models.DateTimeField(null=True)
    synced_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shopify_customer"
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "shopify_customer_id"],
                name="unique_shop_customer",
            ),
        ]

    def __str__(self):
        full_name = " ".join(filter(None, [self.first_name, self.last_name]))
        return full_name or self.email or self.shopify_customer_id


class Address(models.Model):
    """Order-private address snapshot. Created fresh on every order save."""

    shop = models.CharField(max_length=255, db_index=True)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="addresses",
    )
    first_name = models.CharField(max_length=255, blank=True, null=True)
    last_name = models.CharField(max_length=255, blank=True, null=True)
    name = models.CharField(max_length=255, blank=True, null=True)
    company = models.CharField(max_length=255, blank=True, null=True)
    address1 = models.CharField(max_length=255, blank=True, null=True)
    address2 = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=255, blank=True, null=True)
    province = models.CharField(max_length=255, blank=True, null=True)
    province_code = models.CharField(max_length=16, blank=True, null=True)
    country = models.CharField(max_length=255, blank=True, null=True)
    country_code = models.CharField(max_length=8, blank=True, null=True)
    zip = models.CharField(max_length=32, blank=True, null=True)
    phone = models.CharField(max_length=64, blank=True, null=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    class Meta:
        db_table = "shopify_address"

    def __str__(self):
        return ", ".join(filter(None, [self.address1, self.city, self.country]))


class Order(models.Model):
    FINANCIAL_STATUS_CANCELLED = "CANCELLED"
    FULFILLMENT_STATUS_FULFILLED = "FULFILLED"

    shop = models.CharField(max_length=255, db_index=True)
    shopify_order_id = models.CharField(max_length=64)
    order_number = models.IntegerField(null=True, blank=True)
    name = models.CharField(max_length=64)
    email = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=64, blank=True, null=True)
    total_price = models.DecimalField(max_digits=15, decimal_places=3)
    subtotal_price = models.DecimalField(
        max_digits=15, decimal_places=3, null=True, blank=True
    )
    total_tax = models.DecimalField(
        max_digits=15, decimal_places=3, null=True, blank=True
    )
    total_discounts = models.DecimalField(
        max_digits=15, decimal_places=3, null=True, blank=True
    )
    # Shop money currency; shared by every amount on the order.
    currency = models.CharField(max_length=3)
    financial_status = models.CharField(max_length=32, blank=True, null=True)
    fulfillment_status = models.CharField(max_length=32, blank=True, null=True)
    tags = models.TextField(blank=True, default="")
    note = models.TextField(blank=True, null=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()
    cancelled_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)
    test = models.BooleanField(default=False)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    shipping_address = models.ForeignKey(
        Address,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    billing_address = models.ForeignKey(
        Address,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    synced_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shopify_order"
        indexes = [
            models.Index(
                fields=["shop", "created_at"], name="shopify_ord_shop_7c1e2a_idx"
            ),
            models.Index(
                fields=["shop", "financial_status"], name="shopify_ord_shop_3b9f4d_idx"
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "shopify_order_id"],
                name="unique_shop_order",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.shop})"

    @property
    def tag_list(self):
        return split_tags(self.tags)


class LineItem(models.Model):
    """Owned by exactly one Order; replaced wholesale on every re-sync."""

    shop = models.CharField(max_length=255, db_index=True)
    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name="line_items"
    )
    shopify_line_item_id = models.CharField(max_length=64, db_index=True)
    product_id = models.CharField(max_length=64, blank=True, null=True)
    variant_id = models.CharField(max_length=64, blank=True, null=True)
    title = models.CharField(max_length=512)
    variant_title = models.CharField(max_length=512, blank=True, null=True)
    sku = models.CharField(max_length=255, blank=True, null=True)
    vendor = models.CharField(max_length=255, blank=True, null=True)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=15, decimal_places=3)
    total_discount = models.DecimalField(
        max_digits=15, decimal_places=3, null=True, blank=True
    )
    taxable = models.BooleanField(default=True)
    requires_shipping = models.BooleanField(default=True)
    fulfillment_service = models.CharField(max_length=255, blank=True, null=True)
    fulfillment_status = models.CharField(max_length=32, blank=True, null=True)
    grams = models.IntegerField(null=True, blank=True)

    class Meta:
        db_table = "shopify_line_item"

    def __str__(self):
        return f"{self.quantity} x {self.title}"


class WebhookLog(models.Model):
    """Audit log for every webhook received. Never deleted by this app."""

    class Status(models.TextChoices):
        RECEIVED = "received"
        VERIFIED = "verified"
        REJECTED = "rejected"
        PROCESSING = "processing"
        PROCESSED = "processed"
        FAILED = "failed"

    webhook_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    topic = models.CharField(max_length=100, blank=True, default="")
    shop_domain = models.CharField(max_length=255, blank=True, default="", db_index=True)
    payload = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.RECEIVED
    )
    processed = models.BooleanField(default=False)
    order_id = models.CharField(max_length=64, blank=True, null=True)
    error = models.TextField(blank=True, default="")
    processing_time_ms = models.IntegerField(null=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shopify_webhook_log"
        indexes = [
            models.Index(
                fields=["shop_domain", "topic", "created_at"],
                name="shopify_web_shop_do_5a8c61_idx",
            ),
        ]

    def __str__(self):
        return f"{self.topic} [{self.status}] ({self.shop_domain})"
