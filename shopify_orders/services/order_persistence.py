"""Persistence mapper: writes a Shopify GraphQL order into the local store.

One call to :func:`save_order` resolves the nested entities in dependency
order inside a single transaction:

1. upsert the :class:`~shopify_orders.models.Customer` (keyed by shop and
   remote customer id),
2. insert fresh shipping / billing :class:`~shopify_orders.models.Address`
   rows,
3. upsert the :class:`~shopify_orders.models.Order` (keyed by shop and
   remote order id), then drop the address rows it referenced before,
4. replace all of the order's :class:`~shopify_orders.models.LineItem` rows.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import transaction
from django.utils.dateparse import parse_datetime

from ..exceptions import OrderPayloadError
from ..models import Address, Customer, LineItem, Order
from ..utils import extract_id, join_tags

logger = logging.getLogger(__name__)

# Conversion factors from Shopify WeightUnit values to grams.
GRAMS_PER_UNIT = {
    "GRAMS": Decimal("1"),
    "KILOGRAMS": Decimal("1000"),
    "OUNCES": Decimal("28.349523125"),
    "POUNDS": Decimal("453.59237"),
}

# Matches decimal_places of the money columns (three-decimal currencies such as KWD).
MONEY_DECIMAL_PLACES = 3


def parse_decimal(value):
    """Parse a money string as Decimal. ``None`` stays ``None``."""
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise OrderPayloadError(f"Invalid decimal amount: {value!r}")


def parse_money(money_set):
    """Return ``(amount, currency)`` from a ``MoneyBag``-style ``*Set`` field."""
    if not money_set:
        return None, None
    shop_money = money_set.get("shopMoney") or {}
    amount = parse_decimal(shop_money.get("amount"))
    if amount is not None and (
        not amount.is_finite()
        or amount.normalize().as_tuple().exponent < -MONEY_DECIMAL_PLACES
    ):
        raise OrderPayloadError(f"Unsupported money amount: {amount}")
    return amount, shop_money.get("currencyCode")


def parse_timestamp(value):
    if not value:
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise OrderPayloadError(f"Invalid timestamp: {value!r}")
    return parsed


def weight_to_grams(weight):
    """Convert a ``Weight`` object to whole grams, rounding half up."""
    if not weight or weight.get("value") in (None, ""):
        return None
    unit = (weight.get("unit") or "GRAMS").upper()
    factor = GRAMS_PER_UNIT.get(unit)
    if factor is None:
        logger.warning("Unknown weight unit %s, assuming grams", unit)
        factor = GRAMS_PER_UNIT["GRAMS"]
    grams = parse_decimal(weight["value"]) * factor
    return int(grams.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_order_number(name):
    """``"#1001"`` → ``1001``; names that are not numeric give ``None``."""
    digits = (name or "").lstrip("#").strip()
    return int(digits) if digits.isdigit() else None


def _legacy_id(node):
    return node.get("legacyResourceId") or extract_id(node.get("id"))


def _save_customer(customer_data, shop):
    customer_id = _legacy_id(customer_data)
    if not customer_id:
        raise OrderPayloadError("Customer payload has no id")

    total_spent, currency = None, ""
    total_spent_data = customer_data.get("totalSpentV2")
    if total_spent_data:
        total_spent = parse_decimal(total_spent_data.get("amount"))
        currency = total_spent_data.get("currencyCode") or ""

    customer, _ = Customer.objects.update_or_create(
        shop=shop,
        shopify_customer_id=str(customer_id),
        defaults={
            "email": customer_data.get("email"),
            "phone": customer_data.get("phone"),
            "first_name": customer_data.get("firstName"),
            "last_name": customer_data.get("lastName"),
            "orders_count": int(customer_data.get("ordersCount") or 0),
            "total_spent": total_spent if total_spent is not None else Decimal("0"),
            "total_spent_currency": currency,
            "tags": join_tags(customer_data.get("tags")),
            "note": customer_data.get("note"),
            "verified_email": bool(customer_data.get("verifiedEmail")),
            "tax_exempt": bool(customer_data.get("taxExempt")),
            "created_at": parse_timestamp(customer_data.get("createdAt")),
            "updated_at": parse_timestamp(customer_data.get("updatedAt")),
        },
    )
    return customer


def _save_address(address_data, shop, customer):
    if not address_data:
        return None
    return Address.objects.create(
        shop=shop,
        customer=customer,
        first_name=address_data.get("firstName"),
        last_name=address_data.get("lastName"),
        name=address_data.get("name"),
        company=address_data.get("company"),
        address1=address_data.get("address1"),
        address2=address_data.get("address2"),
        city=address_data.get("city"),
        province=address_data.get("province"),
        province_code=address_data.get("provinceCode"),
        country=address_data.get("country"),
        country_code=address_data.get("countryCode"),
        zip=address_data.get("zip"),
        phone=address_data.get("phone"),
        latitude=address_data.get("latitude"),
        longitude=address_data.get("longitude"),
    )


def _build_line_item(node, order, shop):
    line_item_id = extract_id(node.get("id"))
    if not line_item_id:
        raise OrderPayloadError(f"Line item without id on order {order.name}")

    quantity = int(node.get("quantity") or 0)
    if quantity < 1:
        raise OrderPayloadError(
            f"Line item {line_item_id} has non-positive quantity {quantity}"
        )

    price, _ = parse_money(node.get("originalUnitPriceSet"))
    if price is None:
        raise OrderPayloadError(f"Line item {line_item_id} has no unit price")
    total_discount, _ = parse_money(node.get("totalDiscountSet"))

    # Product and variant are null when the product was deleted.
    product = node.get("product") or {}
    variant = node.get("variant") or {}
    fulfillment_service = node.get("fulfillmentService") or {}

    return LineItem(
        shop=shop,
        order=order,
        shopify_line_item_id=line_item_id,
        product_id=_legacy_id(product) if product else None,
        variant_id=_legacy_id(variant) if variant else None,
        title=node.get("title") or "",
        variant_title=node.get("variantTitle"),
        sku=node.get("sku"),
        vendor=node.get("vendor"),
        quantity=quantity,
        price=price,
        total_discount=total_discount,
        taxable=bool(node.get("taxable")),
        requires_shipping=bool(node.get("requiresShipping")),
        fulfillment_service=fulfillment_service.get("serviceName"),
        fulfillment_status=node.get("fulfillmentStatus"),
        grams=weight_to_grams(node.get("weight")),
    )


def _discard_replaced_addresses(previous, order):
    """Delete address rows the order no longer references."""
    if previous is None:
        return
    stale_ids = {
        previous["shipping_address_id"],
        previous["billing_address_id"],
    } - {order.shipping_address_id, order.billing_address_id, None}
    if stale_ids:
        Address.objects.filter(id__in=stale_ids).delete()


def save_order(remote_order, shop):
    """Save or update a Shopify GraphQL order and its nested records.

    Runs in one atomic transaction: either every row for the order is
    written or none is.

    Args:
        remote_order: ``Order`` node as returned by the GraphQL order queries.
        shop: Shop domain that partitions the local rows.

    Returns:
        The saved :class:`~shopify_orders.models.Order`.

    Raises:
        OrderPayloadError: required fields are missing or malformed.
    """
    order_id = _legacy_id(remote_order)
    if not order_id:
        raise OrderPayloadError("Order payload has no id")

    total_price, currency = parse_money(remote_order.get("totalPriceSet"))
    if total_price is None:
        raise OrderPayloadError(f"Order {order_id} has no total price")
    created_at = parse_timestamp(remote_order.get("createdAt"))
    updated_at = parse_timestamp(remote_order.get("updatedAt")) or created_at
    if created_at is None:
        raise OrderPayloadError(f"Order {order_id} has no creation timestamp")

    with transaction.atomic():
        customer = None
        if remote_order.get("customer"):
            customer = _save_customer(remote_order["customer"], shop)

        shipping_address = _save_address(
            remote_order.get("shippingAddress"), shop, customer
        )
        billing_address = _save_address(
            remote_order.get("billingAddress"), shop, customer
        )

        previous = (
            Order.objects.select_for_update()
            .filter(shop=shop, shopify_order_id=str(order_id))
            .values("shipping_address_id", "billing_address_id")
            .first()
        )

        name = remote_order.get("name") or ""
        order, created = Order.objects.update_or_create(
            shop=shop,
            shopify_order_id=str(order_id),
            defaults={
                "order_number": parse_order_number(name),
                "name": name,
                "email": remote_order.get("email"),
                "phone": remote_order.get("phone"),
                "total_price": total_price,
                "subtotal_price": parse_money(remote_order.get("subtotalPriceSet"))[0],
                "total_tax": parse_money(remote_order.get("totalTaxSet"))[0],
                "total_discounts": parse_money(remote_order.get("totalDiscountsSet"))[0],
                "currency": currency or "",
                "financial_status": remote_order.get("financialStatus"),
                "fulfillment_status": remote_order.get("fulfillmentStatus"),
                "tags": join_tags(remote_order.get("tags")),
                "note": remote_order.get("note"),
                "processed_at": parse_timestamp(remote_order.get("processedAt")),
                "created_at": created_at,
                "updated_at": updated_at,
                "cancelled_at": parse_timestamp(remote_order.get("cancelledAt")),
                "closed_at": parse_timestamp(remote_order.get("closedAt")),
                "test": bool(remote_order.get("test")),
                "customer": customer,
                "shipping_address": shipping_address,
                "billing_address": billing_address,
            },
        )
        _discard_replaced_addresses(previous, order)

        order.line_items.all().delete()
        edges = (remote_order.get("lineItems") or {}).get("edges") or []
        LineItem.objects.bulk_create(
            [_build_line_item(edge["node"], order, shop) for edge in edges]
        )

    logger.info(
        "%s order %s (%s) with %d line items for %s",
        "Created" if created else "Updated",
        order.name,
        order_id,
        len(edges),
        shop,
    )
    return order
