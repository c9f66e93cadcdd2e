import pytest

from shopify_orders.models import ShopifyShopConfig

from .factories import SHOP


@pytest.fixture
def shop_config(db):
    return ShopifyShopConfig.objects.create(
        shop_domain=SHOP,
        api_access_token="shpat_test",
        webhook_secret="",
    )


@pytest.fixture
def sleeps():
    """Recorder used in place of time.sleep."""
    calls = []

    def _sleep(seconds):
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
