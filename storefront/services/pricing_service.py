# storefront/services/pricing_service.py
from dataclasses import dataclass
from typing import Iterable, List

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import VariantNotFound
from storefront.services.catalog import CatalogVariant


@dataclass(frozen=True)
class PricedLine:
    variant: CatalogVariant
    quantity: int
    unit_price: int

    @property
    def subtotal(self) -> int:
        return self.quantity * self.unit_price


class PricingService:
    """
    Cena jest rozwiazywana z katalogu w chwili skladania zamowienia.
    Koszyk nie trzyma cen, wiec cena z przegladania moze sie roznic od pobranej.
    """

    def __init__(self, catalog):
        self.catalog = catalog

    def price_line_items(self, cart_items: Iterable[CartItemModel]) -> List[PricedLine]:
        lines = []
        for item in cart_items:
            variant = self.catalog.get_variant(item.variant_id)
            if variant is None:
                raise VariantNotFound(item.variant_id)
            lines.append(PricedLine(variant=variant, quantity=item.quantity, unit_price=variant.unit_price))
        return lines

    @staticmethod
    def total(lines: Iterable[PricedLine]) -> int:
        return sum((line.subtotal for line in lines), 0)
