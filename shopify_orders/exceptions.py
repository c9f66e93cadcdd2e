"""Exception types raised by the order sync pipeline."""


class ShopifyAPIError(Exception):
    """Base class for failures reported by the Shopify Admin API."""


class ShopifyGraphQLError(ShopifyAPIError):
    """A GraphQL request failed.

    ``code`` carries the first error's ``extensions.code`` (for example
    ``THROTTLED`` or ``INTERNAL_ERROR``) when Shopify reports one.
    """

    def __init__(self, message, code=None, errors=None, status_code=None):
        super().__init__(message)
        self.code = code
        self.errors = errors or []
        self.status_code = status_code


class ShopNotConfigured(ShopifyAPIError):
    """No active ShopifyShopConfig exists for a shop domain."""


class OrderPayloadError(ValueError):
    """A remote order or webhook payload is missing required data."""
