"""Remote order fetcher: paginated, rate-paced and retrying GraphQL reads."""

import logging
import time

import requests

from ..exceptions import ShopifyAPIError
from ..graphql import ORDER_QUERY, ORDERS_QUERY
from ..utils import to_shopify_gid
from .shopify_client import is_retryable_error

logger = logging.getLogger(__name__)

PAGE_SIZE = 50
RATE_LIMIT_DELAY = 0.5  # seconds, before every page request
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds, doubled on every retry


class OrderFetcher:
    """Reads orders from Shopify through a :class:`ShopifyGraphQLClient`.

    ``sleep`` is called for every pacing and backoff delay, so callers can
    substitute a no-op or a recorder.
    """

    def __init__(
        self,
        client,
        sleep=time.sleep,
        page_size=PAGE_SIZE,
        rate_limit_delay=RATE_LIMIT_DELAY,
        max_retries=MAX_RETRIES,
        retry_base_delay=RETRY_BASE_DELAY,
    ):
        self.client = client
        self.sleep = sleep
        self.page_size = page_size
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    def fetch_all(self, shop, on_progress=None):
        """Fetch every order of ``shop``, newest first.

        Args:
            shop: Shop domain, used for logging.
            on_progress: Optional callable receiving the running count of
                fetched orders after each page. Advisory only; its failures
                are logged and ignored.

        Returns:
            list of order dicts in the order Shopify returned them.

        Raises:
            ShopifyAPIError: a later page lacks the orders connection, or a
                page reports more results without a cursor to reach them.
        """
        orders = []
        cursor = None
        page_count = 0

        while True:
            self.sleep(self.rate_limit_delay)

            variables = {"first": self.page_size}
            if cursor:
                variables["after"] = cursor

            data = self._execute_with_retry(ORDERS_QUERY, variables)
            connection = data.get("orders")
            if not connection:
                if page_count:
                    raise ShopifyAPIError(
                        f"Orders connection missing on page {page_count + 1} for {shop}"
                    )
                break

            orders.extend(edge["node"] for edge in connection.get("edges", []))
            page_count += 1
            notify_progress(on_progress, len(orders))
            logger.info(
                "Fetched page %d for %s, total orders: %d",
                page_count,
                shop,
                len(orders),
            )

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
            if not cursor:
                # Requesting without a cursor would restart at page one.
                raise ShopifyAPIError(
                    f"hasNextPage without endCursor on page {page_count} for {shop}"
                )

        logger.info("Fetched %d orders from Shopify for %s", len(orders), shop)
        return orders

    def fetch_one(self, order_id):
        """Fetch a single order by numeric id or GID; ``None`` when absent."""
        gid = str(order_id)
        if not gid.startswith("gid://"):
            gid = to_shopify_gid("Order", gid)
        data = self._execute_with_retry(ORDER_QUERY, {"id": gid})
        return data.get("order")

    def _execute_with_retry(self, query, variables):
        attempt = 0
        while True:
            try:
                return self.client.execute(query, variables)
            except (ShopifyAPIError, requests.RequestException) as exc:
                if attempt >= self.max_retries or not is_retryable_error(exc):
                    raise
                delay = self.retry_base_delay * (2 ** attempt)
                attempt += 1
                logger.warning(
                    "Retrying GraphQL query (attempt %d/%d) in %.1fs: %s",
                    attempt,
                    self.max_retries,
                    delay,
                    exc,
                )
                self.sleep(delay)


def notify_progress(callback, *args):
    """Invoke a progress callback without letting it affect the caller."""
    if callback is None:
        return
    try:
        callback(*args)
    except Exception:
        logger.exception("Progress callback failed; continuing")
