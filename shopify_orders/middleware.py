import base64
import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)


def verify_shopify_hmac(request_body: bytes, hmac_header: str, secret: str) -> bool:
    """Verify the HMAC-SHA256 signature from a Shopify webhook request.

    Shopify sends an X-Shopify-Hmac-Sha256 header containing a Base64-encoded
    HMAC-SHA256 digest of the raw request body, computed using the app's
    webhook secret.

    When no secret is configured verification is skipped and the request is
    treated as authentic. This is the development default; production
    deployments must set ``SHOPIFY_WEBHOOK_SECRET`` or a per-shop secret.

    Args:
        request_body: The raw HTTP request body bytes.
        hmac_header: The value of X-Shopify-Hmac-Sha256 header.
        secret: The shop's webhook secret, possibly empty.

    Returns:
        True if the signature is valid (or verification is disabled),
        False otherwise.
    """
    if not secret:
        logger.debug("No webhook secret configured, skipping HMAC verification")
        return True

    computed = base64.b64encode(
        hmac.new(secret.encode("utf-8"), request_body, hashlib.sha256).digest()
    )
    return hmac.compare_digest(computed, (hmac_header or "").encode("utf-8"))
