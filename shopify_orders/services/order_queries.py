"""Read-side queries over the locally stored orders."""

import math

from django.db.models import Q

from ..models import Order
from ..serializers import OrderSerializer

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 250

# Accepted sort keys, including the camelCase names used by the admin UI.
SORT_FIELDS = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
    "processed_at": "processed_at",
    "processedAt": "processed_at",
    "name": "name",
    "order_number": "order_number",
    "orderNumber": "order_number",
    "total_price": "total_price",
    "totalPrice": "total_price",
    "financial_status": "financial_status",
    "financialStatus": "financial_status",
    "fulfillment_status": "fulfillment_status",
    "fulfillmentStatus": "fulfillment_status",
}
DEFAULT_SORT_FIELD = "created_at"


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def list_orders(
    shop,
    page=1,
    limit=DEFAULT_PAGE_SIZE,
    search=None,
    status=None,
    sort_by=DEFAULT_SORT_FIELD,
    sort_order="desc",
):
    """Return one page of stored orders for ``shop``.

    Args:
        shop: Shop domain.
        page: 1-based page number.
        limit: Page size, capped at ``MAX_PAGE_SIZE``.
        search: Case-insensitive text matched against order name, email and
            customer first/last name.
        status: Exact financial status filter.
        sort_by: One of ``SORT_FIELDS``; unknown keys sort by creation time.
        sort_order: ``"asc"`` or ``"desc"``.

    Returns:
        dict: ``{"orders": [...], "pagination": {"page", "limit", "total",
        "pages"}}``
    """
    page = _positive_int(page, 1)
    limit = min(_positive_int(limit, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)

    queryset = Order.objects.filter(shop=shop)
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search)
            | Q(email__icontains=search)
            | Q(customer__first_name__icontains=search)
            | Q(customer__last_name__icontains=search)
        )
    if status:
        queryset = queryset.filter(financial_status=status)

    field = SORT_FIELDS.get(sort_by, DEFAULT_SORT_FIELD)
    ordering = field if sort_order == "asc" else f"-{field}"
    # Secondary key keeps page boundaries stable when the sort key ties.
    queryset = queryset.order_by(ordering, "-id")

    total = queryset.count()
    offset = (page - 1) * limit
    orders = (
        queryset.select_related("customer", "shipping_address", "billing_address")
        .prefetch_related("line_items")[offset:offset + limit]
    )

    return {
        "orders": OrderSerializer(orders, many=True).data,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }
