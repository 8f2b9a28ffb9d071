"""
Cost segregation asset classes and typical reclassification splits.

The percentages below are industry averages from engineering-based cost
segregation studies, keyed by property type. They are business defaults,
not derived values.
"""
from __future__ import annotations

from dataclasses import dataclass, replace

from costseg.domain.errors import InvalidInput, UnsupportedPropertyType
from costseg.domain.schedule import AssetAllocationItem

# property types depreciated over 27.5 years; everything else is 39
RESIDENTIAL_TYPES = frozenset({"residential", "multifamily"})

LAND = "land"
BUILDING_CATEGORIES = frozenset({"building_27_5yr", "building_39yr", LAND})


@dataclass(frozen=True)
class AssetClass:
    category: str
    recovery_period: float
    description: str
    examples: tuple[str, ...]


ASSET_CLASSES: tuple[AssetClass, ...] = (
    AssetClass(
        category="personal_property_5yr",
        recovery_period=5,
        description="5-Year Personal Property",
        examples=("Carpeting", "Appliances", "Task lighting", "Decorative fixtures"),
    ),
    AssetClass(
        category="personal_property_7yr",
        recovery_period=7,
        description="7-Year Personal Property",
        examples=("Office furniture", "Cabinetry", "Security systems", "Signs"),
    ),
    AssetClass(
        category="land_improvements_15yr",
        recovery_period=15,
        description="15-Year Land Improvements",
        examples=("Parking lots", "Landscaping", "Sidewalks", "Fencing", "Site utilities"),
    ),
    AssetClass(
        category="building_27_5yr",
        recovery_period=27.5,
        description="27.5-Year Residential Rental",
        examples=("Structural components", "HVAC (residential)", "Plumbing", "Electrical (building)"),
    ),
    AssetClass(
        category="building_39yr",
        recovery_period=39,
        description="39-Year Nonresidential",
        examples=("Structural components", "HVAC (commercial)", "Plumbing", "Electrical (building)"),
    ),
    AssetClass(
        category=LAND,
        recovery_period=0,
        description="Land (Non-depreciable)",
        examples=("Raw land value",),
    ),
)

_CLASS_BY_CATEGORY = {c.category: c for c in ASSET_CLASSES}

# percent of total value per asset class; each row sums to 100
TYPICAL_RECLASSIFICATION: dict[str, dict[str, float]] = {
    "commercial": {
        "personal_property_5yr": 8,
        "personal_property_7yr": 7,
        "land_improvements_15yr": 10,
        "building_39yr": 55,
        "land": 20,
    },
    "residential": {
        "personal_property_5yr": 10,
        "personal_property_7yr": 5,
        "land_improvements_15yr": 8,
        "building_27_5yr": 57,
        "land": 20,
    },
    "mixed-use": {
        "personal_property_5yr": 9,
        "personal_property_7yr": 6,
        "land_improvements_15yr": 9,
        "building_39yr": 56,
        "land": 20,
    },
    "industrial": {
        "personal_property_5yr": 12,
        "personal_property_7yr": 8,
        "land_improvements_15yr": 12,
        "building_39yr": 48,
        "land": 20,
    },
    "retail": {
        "personal_property_5yr": 10,
        "personal_property_7yr": 8,
        "land_improvements_15yr": 8,
        "building_39yr": 54,
        "land": 20,
    },
    "hospitality": {
        "personal_property_5yr": 15,
        "personal_property_7yr": 10,
        "land_improvements_15yr": 8,
        "building_39yr": 47,
        "land": 20,
    },
    "healthcare": {
        "personal_property_5yr": 12,
        "personal_property_7yr": 10,
        "land_improvements_15yr": 6,
        "building_39yr": 52,
        "land": 20,
    },
    "multifamily": {
        "personal_property_5yr": 12,
        "personal_property_7yr": 5,
        "land_improvements_15yr": 10,
        "building_27_5yr": 53,
        "land": 20,
    },
}

PROPERTY_TYPES: tuple[str, ...] = tuple(TYPICAL_RECLASSIFICATION)


def normalize_property_type(property_type: str) -> str:
    """
    'Mixed_Use ' -> 'mixed-use'. Raises UnsupportedPropertyType for labels
    outside TYPICAL_RECLASSIFICATION.
    """
    t = str(property_type or "").strip().lower().replace("_", "-")
    if t not in TYPICAL_RECLASSIFICATION:
        raise UnsupportedPropertyType(property_type, PROPERTY_TYPES)
    return t


def is_residential(property_type: str) -> bool:
    t = str(property_type or "").strip().lower().replace("_", "-")
    return t in RESIDENTIAL_TYPES


def describe_category(category: str) -> str:
    cls = _CLASS_BY_CATEGORY.get(category)
    return cls.description if cls else category


def get_default_allocation(property_type: str, building_value: float) -> list[AssetAllocationItem]:
    """
    Split a value into the typical asset classes for a property type.

    Amounts are rounded to cents; whatever rounding leaves over goes into the
    building bucket so the items always add back up to building_value.
    """
    if building_value is None or building_value <= 0:
        raise InvalidInput("building_value must be a positive number")

    percentages = TYPICAL_RECLASSIFICATION[normalize_property_type(property_type)]

    items: list[AssetAllocationItem] = []
    for asset_class in ASSET_CLASSES:
        pct = percentages.get(asset_class.category)
        if not pct:
            continue
        items.append(
            AssetAllocationItem(
                category=asset_class.category,
                description=asset_class.description,
                recovery_period=asset_class.recovery_period,
                amount=round(building_value * pct / 100.0, 2),
                percentage=float(pct),
            )
        )

    residue = round(building_value - sum(i.amount for i in items), 2)
    if residue:
        for idx, item in enumerate(items):
            if item.category in ("building_27_5yr", "building_39yr"):
                items[idx] = replace(item, amount=round(item.amount + residue, 2))
                break

    return items
