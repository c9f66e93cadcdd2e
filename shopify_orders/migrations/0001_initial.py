# Generated manually for shopify_orders app

import django.db.models.deletion
from django.db import migrations, models


def _id_field():
    return models.AutoField(
        auto_created=True,
        primary_key=True,
        serialize=False,
        verbose_name="ID",
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ShopifyShopConfig",
            fields=[
                ("id", _id_field()),
                ("shop_domain", models.CharField(max_length=255, unique=True)),
                ("api_access_token", models.TextField()),
                (
                    "webhook_secret",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "api_version",
                    models.CharField(default="2024-07", max_length=10),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "shopify_shop_config",
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", _id_field()),
                ("shop", models.CharField(db_index=True, max_length=255)),
                ("shopify_customer_id", models.CharField(max_length=64)),
                ("email", models.CharField(blank=True, max_length=255, null=True)),
                ("phone", models.CharField(blank=True, max_length=64, null=True)),
                ("first_name", models.CharField(blank=True, max_length=255, null=True)),
                ("last_name", models.CharField(blank=True, max_length=255, null=True)),
                ("orders_count", models.IntegerField(default=0)),
                (
                    "total_spent",
                    models.DecimalField(decimal_places=3, default=0, max_digits=15),
                ),
                (
                    "total_spent_currency",
                    models.CharField(blank=True, default="", max_length=3),
                ),
                ("tags", models.TextField(blank=True, default="")),
                ("note", models.TextField(blank=True, null=True)),
                ("verified_email", models.BooleanField(default=False)),
                ("tax_exempt", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(null=True)),
                ("updated_at", models.DateTimeField(null=True)),
                ("synced_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "shopify_customer",
            },
        ),
        migrations.CreateModel(
            name="Address",
            fields=[
                ("id", _id_field()),
                ("shop", models.CharField(db_index=True, max_length=255)),
                ("first_name", models.CharField(blank=True, max_length=255, null=True)),
                ("last_name", models.CharField(blank=True, max_length=255, null=True)),
                ("name", models.CharField(blank=True, max_length=255, null=True)),
                ("company", models.CharField(blank=True, max_length=255, null=True)),
                ("address1", models.CharField(blank=True, max_length=255, null=True)),
                ("address2", models.CharField(blank=True, max_length=255, null=True)),
                ("city", models.CharField(blank=True, max_length=255, null=True)),
                ("province", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "province_code",
                    models.CharField(blank=True, max_length=16, null=True),
                ),
                ("country", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "country_code",
                    models.CharField(blank=True, max_length=8, null=True),
                ),
                ("zip", models.CharField(blank=True, max_length=32, null=True)),
                ("phone", models.CharField(blank=True, max_length=64, null=True)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="addresses",
                        to="shopify_orders.customer",
                    ),
                ),
            ],
            options={
                "db_table": "shopify_address",
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", _id_field()),
                ("shop", models.CharField(db_index=True, max_length=255)),
                ("shopify_order_id", models.CharField(max_length=64)),
                ("order_number", models.IntegerField(blank=True, null=True)),
                ("name", models.CharField(max_length=64)),
                ("email", models.CharField(blank=True, max_length=255, null=True)),
                ("phone", models.CharField(blank=True, max_length=64, null=True)),
                ("total_price", models.DecimalField(decimal_places=3, max_digits=15)),
                (
                    "subtotal_price",
                    models.DecimalField(
                        blank=True, decimal_places=3, max_digits=15, null=True
                    ),
                ),
                (
                    "total_tax",
                    models.DecimalField(
                        blank=True, decimal_places=3, max_digits=15, null=True
                    ),
                ),
                (
                    "total_discounts",
                    models.DecimalField(
                        blank=True, decimal_places=3, max_digits=15, null=True
                    ),
                ),
                ("currency", models.CharField(max_length=3)),
                (
                    "financial_status",
                    models.CharField(blank=True, max_length=32, null=True),
                ),
                (
                    "fulfillment_status",
                    models.CharField(blank=True, max_length=32, null=True),
                ),
                ("tags", models.TextField(blank=True, default="")),
                ("note", models.TextField(blank=True, null=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                ("test", models.BooleanField(default=False)),
                ("synced_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="shopify_orders.customer",
                    ),
                ),
                (
                    "shipping_address",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopify_orders.address",
                    ),
                ),
                (
                    "billing_address",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopify_orders.address",
                    ),
                ),
            ],
            options={
                "db_table": "shopify_order",
            },
        ),
        migrations.CreateModel(
            name="LineItem",
            fields=[
                ("id", _id_field()),
                ("shop", models.CharField(db_index=True, max_length=255)),
                (
                    "shopify_line_item_id",
                    models.CharField(db_index=True, max_length=64),
                ),
                ("product_id", models.CharField(blank=True, max_length=64, null=True)),
                ("variant_id", models.CharField(blank=True, max_length=64, null=True)),
                ("title", models.CharField(max_length=512)),
                (
                    "variant_title",
                    models.CharField(blank=True, max_length=512, null=True),
                ),
                ("sku", models.CharField(blank=True, max_length=255, null=True)),
                ("vendor", models.CharField(blank=True, max_length=255, null=True)),
                ("quantity", models.PositiveIntegerField()),
                ("price", models.DecimalField(decimal_places=3, max_digits=15)),
                (
                    "total_discount",
                    models.DecimalField(
                        blank=True, decimal_places=3, max_digits=15, null=True
                    ),
                ),
                ("taxable", models.BooleanField(default=True)),
                ("requires_shipping", models.BooleanField(default=True)),
                (
                    "fulfillment_service",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "fulfillment_status",
                    models.CharField(blank=True, max_length=32, null=True),
                ),
                ("grams", models.IntegerField(blank=True, null=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="line_items",
                        to="shopify_orders.order",
                    ),
                ),
            ],
            options={
                "db_table": "shopify_line_item",
            },
        ),
        migrations.CreateModel(
            name="WebhookLog",
            fields=[
                ("id", _id_field()),
                (
                    "webhook_id",
                    models.CharField(
                        blank=True, db_index=True, default="", max_length=255
                    ),
                ),
                ("topic", models.CharField(blank=True, default="", max_length=100)),
                (
                    "shop_domain",
                    models.CharField(
                        blank=True, db_index=True, default="", max_length=255
                    ),
                ),
                ("payload", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("received", "Received"),
                            ("verified", "Verified"),
                            ("rejected", "Rejected"),
                            ("processing", "Processing"),
                            ("processed", "Processed"),
                            ("failed", "Failed"),
                        ],
                        default="received",
                        max_length=20,
                    ),
                ),
                ("processed", models.BooleanField(default=False)),
                ("order_id", models.CharField(blank=True, max_length=64, null=True)),
                ("error", models.TextField(blank=True, default="")),
                ("processing_time_ms", models.IntegerField(null=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "shopify_webhook_log",
            },
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(
                fields=["shop", "created_at"], name="shopify_ord_shop_7c1e2a_idx"
            ),
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(
                fields=["shop", "financial_status"], name="shopify_ord_shop_3b9f4d_idx"
            ),
        ),
        migrations.AddIndex(
            model_name="webhooklog",
            index=models.Index(
                fields=["shop_domain", "topic", "created_at"],
                name="shopify_web_shop_do_5a8c61_idx",
            ),
        ),
        migrations.AddConstraint(
            model_name="customer",
            constraint=models.UniqueConstraint(
                fields=("shop", "shopify_customer_id"), name="unique_shop_customer"
            ),
        ),
        migrations.AddConstraint(
            model_name="order",
            constraint=models.UniqueConstraint(
                fields=("shop", "shopify_order_id"), name="unique_shop_order"
            ),
        ),
    ]
