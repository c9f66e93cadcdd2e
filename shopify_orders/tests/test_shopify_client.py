"""Tests for the GraphQL transport and retry classification."""

from unittest.mock import MagicMock

import pytest
import requests

from shopify_orders.exceptions import ShopifyGraphQLError
from shopify_orders.services.shopify_client import (
    ShopifyGraphQLClient,
    is_retryable_error,
)


def _response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Client Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


def _client(response):
    session = MagicMock()
    session.post.return_value = response
    client = ShopifyGraphQLClient(
        "test-shop.myshopify.com", "shpat_test", api_version="2024-07", session=session
    )
    return client, session


class TestExecute:
    def test_posts_query_and_returns_data(self):
        client, session = _client(_response(body={"data": {"order": {"id": "1"}}}))

        data = client.execute("query { order }", {"id": "gid://shopify/Order/1"})

        assert data == {"order": {"id": "1"}}
        args, kwargs = session.post.call_args
        assert args[0] == (
            "https://test-shop.myshopify.com/admin/api/2024-07/graphql.json"
        )
        assert kwargs["headers"]["X-Shopify-Access-Token"] == "shpat_test"
        assert kwargs["json"] == {
            "query": "query { order }",
            "variables": {"id": "gid://shopify/Order/1"},
        }
        assert kwargs["timeout"] == 30

    def test_graphql_error_carries_extension_code(self):
        body = {
            "errors": [
                {"message": "Throttled", "extensions": {"code": "THROTTLED"}}
            ]
        }
        client, _ = _client(_response(body=body))

        with pytest.raises(ShopifyGraphQLError) as excinfo:
            client.execute("query { orders }")

        assert excinfo.value.code == "THROTTLED"
        assert str(excinfo.value) == "Throttled"

    def test_graphql_error_without_code(self):
        body = {"errors": [{"message": "Field 'foo' doesn't exist"}]}
        client, _ = _client(_response(body=body))

        with pytest.raises(ShopifyGraphQLError) as excinfo:
            client.execute("query { foo }")

        assert excinfo.value.code is None

    def test_http_429_is_throttled(self):
        client, _ = _client(_response(status_code=429))

        with pytest.raises(ShopifyGraphQLError) as excinfo:
            client.execute("query { orders }")

        assert excinfo.value.code == "THROTTLED"
        assert excinfo.value.status_code == 429

    def test_http_503_is_internal_error(self):
        client, _ = _client(_response(status_code=503))

        with pytest.raises(ShopifyGraphQLError) as excinfo:
            client.execute("query { orders }")

        assert excinfo.value.code == "INTERNAL_ERROR"

    def test_http_401_raises_http_error(self):
        client, _ = _client(_response(status_code=401))

        with pytest.raises(requests.HTTPError):
            client.execute("query { orders }")

    def test_missing_data_returns_empty_dict(self):
        client, _ = _client(_response(body={"data": None}))
        assert client.execute("query { order }") == {}


class TestFromConfig:
    def test_uses_config_credentials(self):
        config = MagicMock()
        config.shop_domain = "other.myshopify.com"
        config.api_access_token = "shpat_other"
        config.api_version = "2025-01"

        client = ShopifyGraphQLClient.from_config(config, session=MagicMock())

        assert client.endpoint == (
            "https://other.myshopify.com/admin/api/2025-01/graphql.json"
        )
        assert client.access_token == "shpat_other"


class TestIsRetryableError:
    @pytest.mark.parametrize("code", ["THROTTLED", "INTERNAL_ERROR"])
    def test_retryable_codes(self, code):
        assert is_retryable_error(ShopifyGraphQLError("boom", code=code)) is True

    def test_other_code_not_retryable(self):
        assert is_retryable_error(ShopifyGraphQLError("boom", code="ACCESS_DENIED")) is False

    def test_missing_code_not_retryable(self):
        assert is_retryable_error(ShopifyGraphQLError("boom")) is False

    def test_non_graphql_errors_not_retryable(self):
        assert is_retryable_error(requests.ConnectionError("down")) is False
        assert is_retryable_error(ValueError("bad")) is False
