"""Register the order webhook subscriptions with Shopify.

Uses the Admin REST ``webhooks`` resource. A topic that already has a
subscription is updated in place to point at the callback URL; any other
topic gets a new subscription. Every topic is attempted even when an
earlier one fails, so a partial registration is a normal outcome.
"""

import logging

import requests

from ..router import ORDER_TOPICS

logger = logging.getLogger(__name__)


def _api_url(config, path):
    """Build a Shopify Admin API URL."""
    return (
        f"https://{config.shop_domain}/admin/api/"
        f"{config.api_version}/{path}"
    )


def _api_headers(config):
    """Return headers for authenticated Shopify Admin API requests."""
    return {
        "X-Shopify-Access-Token": config.api_access_token,
        "Content-Type": "application/json",
    }


def _existing_subscriptions(config, session):
    """Map topic → webhook id for the shop's current subscriptions."""
    try:
        response = session.get(
            _api_url(config, "webhooks.json"), headers=_api_headers(config), timeout=30
        )
    except requests.RequestException as exc:
        logger.warning("Failed to list webhooks for %s: %s", config.shop_domain, exc)
        return {}
    if response.status_code != 200:
        logger.warning(
            "Failed to list webhooks for %s (HTTP %s): %s",
            config.shop_domain,
            response.status_code,
            response.text,
        )
        return {}
    return {
        webhook["topic"]: webhook["id"]
        for webhook in response.json().get("webhooks", [])
    }


def _register_topic(config, session, topic, callback_url, existing_id):
    body = {"webhook": {"topic": topic, "address": callback_url, "format": "json"}}
    if existing_id is not None:
        body["webhook"]["id"] = existing_id
        response = session.put(
            _api_url(config, f"webhooks/{existing_id}.json"),
            json=body,
            headers=_api_headers(config),
            timeout=30,
        )
    else:
        response = session.post(
            _api_url(config, "webhooks.json"),
            json=body,
            headers=_api_headers(config),
            timeout=30,
        )
    response.raise_for_status()
    return response.json().get("webhook", {}).get("id")


def register_order_webhooks(config, callback_url, session=None):
    """Register (or update) every order topic for one shop.

    Args:
        config: :class:`~shopify_orders.models.ShopifyShopConfig`.
        callback_url: Absolute URL of the order webhook endpoint.
        session: Optional ``requests.Session``.

    Returns:
        dict with keys:
            * ``success`` (bool): ``True`` only if every topic registered.
            * ``registered`` / ``total`` (int): aggregate counts.
            * ``message`` (str): human-readable summary.
            * ``results`` (list): per topic ``{"topic", "success", "id"}``
              or ``{"topic", "success", "error"}``.
    """
    session = session or requests.Session()
    existing = _existing_subscriptions(config, session)

    results = []
    for topic in ORDER_TOPICS:
        try:
            webhook_id = _register_topic(
                config, session, topic, callback_url, existing.get(topic)
            )
        except requests.RequestException as exc:
            logger.error(
                "Error registering webhook %s for %s: %s",
                topic,
                config.shop_domain,
                exc,
            )
            results.append({"topic": topic, "success": False, "error": str(exc)})
            continue
        logger.info(
            "Registered webhook %s → %s for %s", topic, callback_url, config.shop_domain
        )
        results.append({"topic": topic, "success": True, "id": webhook_id})

    registered = sum(1 for result in results if result["success"])
    total = len(results)
    return {
        "success": registered == total,
        "registered": registered,
        "total": total,
        "message": f"Registered {registered}/{total} webhooks successfully",
        "results": results,
    }
