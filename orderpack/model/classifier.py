"""
Item classification and packing-profile resolution.

An item is mapped to a physical bucket through an ordered rule table; the
first matching rule wins. The bucket supplies default density, fragility,
ventilation and per-unit volume, and an optional ItemPackingOverride replaces
any of those defaults field by field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .entities import (
    Fragility,
    ItemDescriptor,
    ItemPackingOverride,
    PackingProfile,
    BOX_KEY_ORDER,
    box_key_rank,
)

logger = logging.getLogger(__name__)

GENERIC = "generic"
BUNDLED = "bundled"

BAG_OVERHEAD_LITERS = 0.2

MAX_KG_PER_BAG: Dict[Fragility, float] = {
    Fragility.very_fragile: 0.7,
    Fragility.fragile: 1.5,
    Fragility.normal: 2.0,
    Fragility.sturdy: 3.0,
}


@dataclass(frozen=True)
class BucketDefaults:
    density_kg_per_liter: float
    fragility: Fragility
    requires_vented: bool
    liters_per_unit: float


BUCKETS: Dict[str, BucketDefaults] = {
    "leafy": BucketDefaults(0.15, Fragility.very_fragile, True, 0.5),
    "herbs": BucketDefaults(0.15, Fragility.very_fragile, True, 0.2),
    "berries": BucketDefaults(0.35, Fragility.very_fragile, True, 0.06),
    "tomatoes": BucketDefaults(0.6, Fragility.fragile, False, 0.1),
    "cucumbers": BucketDefaults(0.6, Fragility.normal, False, 0.1),
    "peppers": BucketDefaults(0.6, Fragility.normal, False, 0.1),
    "apples": BucketDefaults(0.65, Fragility.normal, False, 0.12),
    "citrus": BucketDefaults(0.7, Fragility.sturdy, False, 0.12),
    "roots": BucketDefaults(0.8, Fragility.sturdy, False, 0.15),
    BUNDLED: BucketDefaults(0.5, Fragility.fragile, False, 0.1),
    GENERIC: BucketDefaults(0.5, Fragility.normal, False, 0.1),
}


@dataclass(frozen=True)
class ItemText:
    """Lower-cased descriptive fields the rules match against."""

    type: str
    variety: str
    category: str

    @classmethod
    def of(cls, item: ItemDescriptor) -> "ItemText":
        return cls(
            type=(item.type or "").lower(),
            variety=(item.variety or "").lower(),
            category=(item.category or "").lower(),
        )


Rule = Tuple[Callable[[ItemText], bool], str]


def _type_has(*words: str) -> Callable[[ItemText], bool]:
    return lambda t: any(w in t.type for w in words)


def _category_has(*words: str) -> Callable[[ItemText], bool]:
    return lambda t: any(w in t.category for w in words)


def _variety_has(*words: str) -> Callable[[ItemText], bool]:
    return lambda t: any(w in t.variety for w in words)


def _any_of(*preds: Callable[[ItemText], bool]) -> Callable[[ItemText], bool]:
    return lambda t: any(p(t) for p in preds)


RULES: List[Rule] = [
    (
        _any_of(
            _category_has("leaf"),
            _type_has("lettuce", "spinach", "kale", "chard", "arugula"),
        ),
        "leafy",
    ),
    (_type_has("herb"), "herbs"),
    (_any_of(_type_has("strawberry", "blueberry"), _variety_has("berry")), "berries"),
    (_type_has("tomato"), "tomatoes"),
    (_type_has("cucumber"), "cucumbers"),
    (_type_has("pepper"), "peppers"),
    (_type_has("apple"), "apples"),
    (_any_of(_type_has("orange", "mandarin"), _category_has("citrus")), "citrus"),
    (
        _any_of(
            _type_has("carrot", "potato", "beet", "root"),
            _category_has("carrot", "potato", "beet", "root"),
        ),
        "roots",
    ),
    (_type_has("eggplant"), GENERIC),
    (_type_has("egg", "bread", "milk"), BUNDLED),
]


def classify(item: ItemDescriptor, rules: Sequence[Rule] = RULES) -> str:
    text = ItemText.of(item)
    for predicate, bucket in rules:
        if predicate(text):
            return bucket
    return GENERIC


def bucket_defaults(bucket: str) -> BucketDefaults:
    return BUCKETS.get(bucket, BUCKETS[GENERIC])


def _positive_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or value <= 0:
        return None
    return float(value)


def resolve_profile(
    item: ItemDescriptor,
    override: Optional[ItemPackingOverride] = None,
    warnings: Optional[List[str]] = None,
) -> PackingProfile:
    """
    Merge the item's bucket defaults with its override; a set override field
    always wins. Non-positive numeric overrides are treated as unset.

    An override naming a package size key outside Small/Medium/Large is
    dropped and reported through ``warnings``.
    """
    override = override or ItemPackingOverride()
    bucket = classify(item)
    defaults = bucket_defaults(bucket)

    fragility = (
        Fragility(override.fragility) if override.fragility is not None else defaults.fragility
    )
    allow_mixing = (
        override.allow_mixing
        if override.allow_mixing is not None
        else fragility != Fragility.very_fragile
    )
    requires_vented = (
        override.requires_vented_box
        if override.requires_vented_box is not None
        else defaults.requires_vented
    )

    min_box_key = override.min_box_type or None
    if min_box_key is not None and box_key_rank(min_box_key) is None:
        message = f"Item {item.id} has unknown minimum package size {min_box_key!r}; ignoring it."
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
        min_box_key = None
    elif min_box_key is not None:
        min_box_key = BOX_KEY_ORDER[box_key_rank(min_box_key)]

    density = _positive_or_none(override.density_kg_per_liter) or defaults.density_kg_per_liter
    unit_volume = _positive_or_none(override.unit_volume_liters)

    return PackingProfile(
        bucket=bucket,
        density_kg_per_liter=density,
        fragility=fragility,
        allow_mixing=allow_mixing,
        requires_vented=requires_vented,
        liters_per_unit=unit_volume or defaults.liters_per_unit,
        max_kg_per_bag=_positive_or_none(override.max_kg_per_bag) or MAX_KG_PER_BAG[fragility],
        min_box_key=min_box_key,
        max_weight_per_box_kg=_positive_or_none(override.max_weight_per_box_kg),
        unit_volume_liters=unit_volume,
    )
