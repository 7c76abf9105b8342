"""Tests for order pricing."""

import pytest

from solestore.ordering.order.pricing import ShippingPolicy, price_order
from solestore.settings import ShopSettings


class TestShippingPolicy:
    @pytest.mark.parametrize(
        "subtotal, shipping",
        [(0.0, 10.0), (60.0, 10.0), (100.0, 10.0), (100.01, 0.0), (250.0, 0.0)],
    )
    def test_flat_fee_up_to_threshold(self, subtotal, shipping):
        assert ShippingPolicy().shipping_for(subtotal) == shipping

    def test_from_settings(self):
        policy = ShippingPolicy.from_settings(ShopSettings(shipping_fee=5.0, free_shipping_threshold=50.0))
        assert policy.shipping_for(50.0) == 5.0
        assert policy.shipping_for(50.5) == 0.0


class TestPriceOrder:
    def test_total_has_no_tax(self):
        breakdown = price_order(60.0, ShippingPolicy())
        assert breakdown.subtotal == 60.0
        assert breakdown.shipping == 10.0
        assert breakdown.total == 70.0

    def test_subtotal_is_rounded_to_cents(self):
        assert price_order(0.1 + 0.2, ShippingPolicy()).subtotal == 0.3
