"""Thin Shopify Admin GraphQL client built on ``requests``."""

import logging

import requests
from django.conf import settings

from ..exceptions import ShopifyGraphQLError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-07"

THROTTLED = "THROTTLED"
INTERNAL_ERROR = "INTERNAL_ERROR"
RETRYABLE_ERROR_CODES = frozenset({THROTTLED, INTERNAL_ERROR})


def is_retryable_error(exception):
    """Return True when Shopify reported throttling or an internal error.

    GraphQL errors carry the condition in ``extensions.code``. Shopify also
    reports the same conditions at the HTTP layer (429 / 5xx), which
    :meth:`ShopifyGraphQLClient.execute` maps onto the same codes.
    Everything else is permanent.
    """
    if isinstance(exception, ShopifyGraphQLError):
        return exception.code in RETRYABLE_ERROR_CODES
    return False


class ShopifyGraphQLClient:
    """Client for the Shopify Admin GraphQL endpoint of one shop."""

    def __init__(self, shop_domain, access_token, api_version=None, session=None, timeout=30):
        self.shop_domain = shop_domain
        self.access_token = access_token
        self.api_version = api_version or getattr(
            settings, "SHOPIFY_API_VERSION", DEFAULT_API_VERSION
        )
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_config(cls, config, session=None):
        """Build a client from a :class:`~shopify_orders.models.ShopifyShopConfig`."""
        return cls(
            config.shop_domain,
            config.api_access_token,
            api_version=config.api_version,
            session=session,
        )

    @property
    def endpoint(self):
        return (
            f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"
        )

    def _headers(self):
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
        }

    def execute(self, query, variables=None):
        """Run a GraphQL document and return its ``data`` object.

        Raises:
            ShopifyGraphQLError: the response carried GraphQL errors, or the
                HTTP status reported throttling (429) or a server error (5xx).
            requests.HTTPError: any other unsuccessful HTTP status.
        """
        response = self.session.post(
            self.endpoint,
            headers=self._headers(),
            json={"query": query, "variables": variables or {}},
            timeout=self.timeout,
        )

        if response.status_code == 429:
            raise ShopifyGraphQLError(
                f"Shopify throttled the request for {self.shop_domain}",
                code=THROTTLED,
                status_code=429,
            )
        if 500 <= response.status_code < 600:
            raise ShopifyGraphQLError(
                f"Shopify returned HTTP {response.status_code} for {self.shop_domain}",
                code=INTERNAL_ERROR,
                status_code=response.status_code,
            )
        response.raise_for_status()

        body = response.json()
        errors = body.get("errors")
        if errors:
            if isinstance(errors, list):
                first = errors[0] if errors else {}
                message = first.get("message", "GraphQL query failed")
                code = (first.get("extensions") or {}).get("code")
            else:
                message = str(errors)
                code = None
            logger.warning(
                "GraphQL error from %s (code=%s): %s",
                self.shop_domain,
                code,
                message,
            )
            raise ShopifyGraphQLError(
                message,
                code=code,
                errors=errors if isinstance(errors, list) else [errors],
                status_code=response.status_code,
            )

        return body.get("data") or {}
