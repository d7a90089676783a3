from __future__ import annotations

from typing import List, Tuple

from pydantic import Field

from .common import CostItem, ProjectionModel


class ProductCosts(ProjectionModel):
    product_box: float = 0.0
    bottle_sprayer: float = 0.0
    concentrate: float = 0.0
    nfc_chip: float = 0.0
    print_materials: float = 0.0
    shipping_box: float = 0.0
    manufacturing_labor: float = 0.0
    custom_costs: Tuple[CostItem, ...] = ()

    def fixed_components(self) -> List[tuple[str, float]]:
        return [
            ("Product Box", self.product_box),
            ("Bottle & Sprayer", self.bottle_sprayer),
            ("Concentrate", self.concentrate),
            ("NFC Chip", self.nfc_chip),
            ("Print Materials", self.print_materials),
            ("Shipping Box", self.shipping_box),
            ("Manufacturing Labor", self.manufacturing_labor),
        ]

    def custom_total(self) -> float:
        return sum(item.amount for item in self.custom_costs)
