"""Order pricing: subtotal plus shipping. No tax is charged."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ShippingPolicy:
    """Flat shipping fee, waived once the subtotal is strictly above the threshold."""

    flat_fee: float = 10.0
    free_above: float = 100.0

    @classmethod
    def from_settings(cls, settings) -> "ShippingPolicy":
        return cls(flat_fee=settings.shipping_fee, free_above=settings.free_shipping_threshold)

    def shipping_for(self, subtotal: float) -> float:
        return 0.0 if subtotal > self.free_above else self.flat_fee


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: float
    shipping: float

    @property
    def total(self) -> float:
        return round(self.subtotal + self.shipping, 2)


def price_order(subtotal: float, policy: ShippingPolicy) -> PriceBreakdown:
    subtotal = round(subtotal, 2)
    return PriceBreakdown(subtotal=subtotal, shipping=policy.shipping_for(subtotal))
