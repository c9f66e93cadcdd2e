"""Utility helpers for the Shopify orders app."""


def to_shopify_gid(resource_type, numeric_id):
    """Convert a numeric Shopify ID to the Global ID (GID) format.

    Examples::

        >>> to_shopify_gid("Order", "5123456789")
        'gid://shopify/Order/5123456789'
    """
    return f"gid://shopify/{resource_type}/{numeric_id}"


def extract_id(gid_string):
    """Return the numeric part of a GID, or the value unchanged if it is not one.

    >>> extract_id("gid://shopify/LineItem/13590942711")
    '13590942711'
    """
    if gid_string is None:
        return None
    return str(gid_string).rsplit("/", 1)[-1]


def join_tags(tags):
    """Serialize a tag collection to the comma-joined form stored locally."""
    if not tags:
        return ""
    if isinstance(tags, str):
        return tags
    return ",".join(str(tag) for tag in tags)


def split_tags(value):
    """Parse a comma-joined tag string back into a list."""
    if not value:
        return []
    return [tag.strip() for tag in value.split(",") if tag.strip()]
