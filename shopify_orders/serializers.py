from rest_framework import serializers

from .models import Address, Customer, LineItem, Order
from .utils import split_tags


class CustomerSerializer(serializers.ModelSerializer):
    tags = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = (
            "id",
            "shopify_customer_id",
            "email",
            "phone",
            "first_name",
            "last_name",
            "orders_count",
            "total_spent",
            "total_spent_currency",
            "tags",
            "verified_email",
            "tax_exempt",
        )

    def get_tags(self, obj):
        return split_tags(obj.tags)


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        exclude = ("shop", "customer")


class LineItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = LineItem
        exclude = ("shop", "order")


class OrderSerializer(serializers.ModelSerializer):
    """Denormalized order record for the presentation layer."""

    tags = serializers.ListField(source="tag_list", read_only=True)
    customer = CustomerSerializer(read_only=True)
    shipping_address = AddressSerializer(read_only=True)
    billing_address = AddressSerializer(read_only=True)
    line_items = LineItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = (
            "id",
            "shopify_order_id",
            "order_number",
            "name",
            "email",
            "phone",
            "total_price",
            "subtotal_price",
            "total_tax",
            "total_discounts",
            "currency",
            "financial_status",
            "fulfillment_status",
            "tags",
            "note",
            "processed_at",
            "created_at",
            "updated_at",
            "cancelled_at",
            "closed_at",
            "test",
            "customer",
            "shipping_address",
            "billing_address",
            "line_items",
        )
