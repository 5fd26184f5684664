"""3D-print quote calculator.

Pure functions: no storage, no I/O. The weight is a fixed estimate until
real slicing is available; print time and delivery are fixed labels.
"""

from decimal import Decimal
from typing import NamedTuple

from storefront.models.common import round_money
from storefront.models.printing_models import Material, QualityTier

# Cost per gram of filament/powder
MATERIAL_UNIT_COST = {
    Material.PLA: Decimal("0.05"),
    Material.ABS: Decimal("0.07"),
    Material.PETG: Decimal("0.08"),
    Material.METAL: Decimal("2.50"),
}

QUALITY_MULTIPLIER = {
    QualityTier.DRAFT: Decimal("0.8"),
    QualityTier.STANDARD: Decimal("1.0"),
    QualityTier.FINE: Decimal("1.5"),
}

DEFAULT_WEIGHT_GRAMS = 125
LABOR_COST = Decimal("8.00")
PROCESSING_FEE = Decimal("5.00")
PRINT_TIME_ESTIMATE = "4h 32m"
DELIVERY_ESTIMATE = "3-5 days"


class QuoteResult(NamedTuple):
    """Result of a print quote calculation."""

    material_cost: Decimal
    labor_cost: Decimal
    processing_fee: Decimal
    total: Decimal
    print_time: str
    weight: str
    delivery_time: str
    material: Material
    quality: QualityTier
    infill_density: int


def calculate_quote(
    material: Material,
    quality: QualityTier,
    infill_density: int = 20,
    weight_grams: int = DEFAULT_WEIGHT_GRAMS,
) -> QuoteResult:
    """Calculate the price of printing one part.

    material_cost = weight x unit cost x quality multiplier, and the total
    adds the flat labor cost and processing fee. Infill is carried through
    to the result but does not change the estimate.

    Args:
        material: Material (or its value, e.g. "PLA")
        quality: Quality tier (or its value, e.g. "standard")
        infill_density: Infill percentage
        weight_grams: Estimated part weight

    Returns:
        QuoteResult with every amount rounded to cents
    """
    material = Material(material)
    quality = QualityTier(quality)
    if weight_grams < 0:
        raise ValueError("weight_grams must be non-negative")

    material_cost = round_money(
        Decimal(weight_grams) * MATERIAL_UNIT_COST[material] * QUALITY_MULTIPLIER[quality]
    )
    total = round_money(material_cost + LABOR_COST + PROCESSING_FEE)

    return QuoteResult(
        material_cost=material_cost,
        labor_cost=LABOR_COST,
        processing_fee=PROCESSING_FEE,
        total=total,
        print_time=PRINT_TIME_ESTIMATE,
        weight=f"{weight_grams}g",
        delivery_time=DELIVERY_ESTIMATE,
        material=material,
        quality=quality,
        infill_density=infill_density,
    )
